"""Crash reporter configuration and the HTTP-backed reporter."""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod

from glserver.errors import GameLiftError, GameLiftErrorType
from glserver.metrics.crash_reporter_client import CrashReporterClient, create_client

CRASH_REPORTER_HOST_ENV = "GAMELIFT_CRASH_REPORTER_HOST"
CRASH_REPORTER_PORT_ENV = "GAMELIFT_CRASH_REPORTER_PORT"
DEFAULT_CRASH_REPORTER_HOST = "localhost"
DEFAULT_CRASH_REPORTER_PORT = "8126"

_PORT = re.compile(r"[+-]?[0-9]+")


class CrashReporter(ABC):
    """Tells a crash reporter about the process and its game session."""

    @abstractmethod
    def register_process(self) -> None:
        """Register the current process."""

    @abstractmethod
    def tag_game_session(self, session_id: str) -> None:
        """Tag the current process with a game session id."""

    @abstractmethod
    def deregister_process(self) -> None:
        """Remove the current process."""


class HttpCrashReporter(CrashReporter):
    """A crash reporter reached over HTTP."""

    def __init__(self, client: CrashReporterClient, host: str, port: str) -> None:
        self.client = client
        self.host = host
        self.port = port

    def register_process(self) -> None:
        self.client.register_process()

    def tag_game_session(self, session_id: str) -> None:
        self.client.tag_game_session(session_id)

    def deregister_process(self) -> None:
        self.client.deregister_process()


def _config_error(message: str) -> GameLiftError:
    return GameLiftError(GameLiftErrorType.METRIC_CONFIGURATION_EXCEPTION, "", message)


class CrashReporterBuilder:
    """Configures a crash reporter; host and port default to the environment."""

    def __init__(self) -> None:
        self.host = os.environ.get(CRASH_REPORTER_HOST_ENV) or DEFAULT_CRASH_REPORTER_HOST
        self.port = os.environ.get(CRASH_REPORTER_PORT_ENV) or DEFAULT_CRASH_REPORTER_PORT

    def with_host(self, host: str) -> "CrashReporterBuilder":
        self.host = host
        return self

    def with_port(self, port: str) -> "CrashReporterBuilder":
        self.port = port
        return self

    def build(self) -> HttpCrashReporter:
        """Create the reporter; raise a configuration GameLiftError on bad settings."""
        port_text = str(self.port)
        if not _PORT.fullmatch(port_text):
            raise _config_error(
                f"failed to create Crash Reporter client due to invalid port number 0, "
                f'error: invalid port "{port_text}"'
            )
        try:
            client = create_client(self.host, int(port_text))
        except ValueError as err:
            raise _config_error(f"failed to create Crash Reporter client, error: {err}") from err
        return HttpCrashReporter(client, self.host, port_text)


def new_crash_reporter() -> CrashReporterBuilder:
    """Start configuring a crash reporter."""
    return CrashReporterBuilder()