"""Game server SDK building blocks: errors, validation, environment helpers, an atomic flag, tool detection and metrics."""

__version__ = "0.1.0"