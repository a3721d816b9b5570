[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glserver"
version = "0.1.0"
description = "Game server SDK building blocks: errors, validation, environment helpers, counters with derived statistics, and crash reporting"
requires-python = ">=3.10"
dependencies = []
keywords = ["game server", "metrics", "counter", "crash reporter", "telemetry", "sdk"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["glserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
