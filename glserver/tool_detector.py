"""Detection of companion tools running next to the game server."""

from __future__ import annotations

import os
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Callable, Sequence

SDK_TOOL_NAME_ENV = "GAMELIFT_SDK_TOOL_NAME"
SDK_TOOL_VERSION_ENV = "GAMELIFT_SDK_TOOL_VERSION"

_WINDOWS_COMMAND = ("sc", "query", "GLOTelCollector")
_WINDOWS_RUNNING = "RUNNING"
_LINUX_COMMAND = ("systemctl", "is-active", "gl-otel-collector.service")
_LINUX_ACTIVE = "active"


class ToolDetector(ABC):
    """Detects a tool and records it in the environment when it runs."""

    @abstractmethod
    def is_tool_running(self) -> bool:
        """Whether the tool is currently running."""

    @abstractmethod
    def tool_name(self) -> str:
        """The tool's name."""

    @abstractmethod
    def tool_version(self) -> str:
        """The tool's version."""

    def set_gamelift_tool(self) -> None:
        """Record the tool in the environment if it runs and none is recorded yet."""
        if not os.environ.get(SDK_TOOL_NAME_ENV) and self.is_tool_running():
            os.environ[SDK_TOOL_NAME_ENV] = self.tool_name()
            os.environ[SDK_TOOL_VERSION_ENV] = self.tool_version()


class MetricsDetector(ToolDetector):
    """Detects whether the OpenTelemetry collector service is running."""

    def is_tool_running(self) -> bool:
        if sys.platform.startswith("win"):
            return self._check_service(_WINDOWS_COMMAND, lambda out: _WINDOWS_RUNNING in out)
        return self._check_service(_LINUX_COMMAND, lambda out: out.strip() == _LINUX_ACTIVE)

    @staticmethod
    def _check_service(command: Sequence[str], validate: Callable[[str], bool]) -> bool:
        try:
            result = subprocess.run(list(command), capture_output=True, text=True, check=False)
        except (OSError, subprocess.SubprocessError, ValueError):
            return False
        return result.returncode == 0 and validate(result.stdout or "")

    def tool_name(self) -> str:
        return "Metrics"

    def tool_version(self) -> str:
        return "1.0.0"