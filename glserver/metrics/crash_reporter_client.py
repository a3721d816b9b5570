"""HTTP client for the collector's crash reporter."""

from __future__ import annotations

import logging
import os
import urllib.error
import urllib.parse
import urllib.request

DEFAULT_TIMEOUT = 5.0

_REGISTER_PATH = "register"
_UPDATE_PATH = "update"
_DEREGISTER_PATH = "deregister"
_PID_PARAM = "process_pid"
_SESSION_PARAM = "session_id"

_log = logging.getLogger(__name__)


class CrashReporterError(Exception):
    """A request to the crash reporter failed."""


class CrashReporterClient:
    """Registers the current process, and its game session, with the crash reporter."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        if not base_url:
            raise ValueError("baseURL cannot be empty")
        self.base_url = base_url
        self.timeout = timeout
        self._opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))

    def _get(self, url: str, failure: str) -> None:
        try:
            with self._opener.open(url, timeout=self.timeout) as response:
                status, reason = response.status, response.reason
        except urllib.error.HTTPError as err:
            status, reason = err.code, err.reason
            err.close()
        except (urllib.error.URLError, OSError) as err:
            raise CrashReporterError(f"{failure} due to error: {err}") from err
        if not 200 <= status < 300:
            raise CrashReporterError(f"{failure}, Http response: {status} {reason}")

    def register_process(self) -> None:
        """Register the current process."""
        pid = os.getpid()
        url = f"{self.base_url}/{_REGISTER_PATH}?{_PID_PARAM}={pid}"
        _log.info("Registering process with %s=%d in OTEL Collector Crash Reporter", _PID_PARAM, pid)
        self._get(url, f"failed to register {_PID_PARAM}={pid} to OTEL Collector Crash Reporter")

    def tag_game_session(self, session_id: str) -> None:
        """Tag the current process with a game session id."""
        if not session_id:
            raise ValueError("sessionID cannot be empty")
        pid = os.getpid()
        quoted = urllib.parse.quote(session_id, safe="")
        url = f"{self.base_url}/{_UPDATE_PATH}?{_PID_PARAM}={pid}&{_SESSION_PARAM}={quoted}"
        _log.info(
            "Tagging process %d with %s=%s in OTEL Collector Crash Reporter", pid, _SESSION_PARAM, session_id
        )
        self._get(
            url,
            f"failed to tag {_SESSION_PARAM}={session_id} for process {_PID_PARAM}={pid} "
            "in the OTEL Collector Crash Reporter",
        )

    def deregister_process(self) -> None:
        """Remove the current process from the crash reporter."""
        pid = os.getpid()
        url = f"{self.base_url}/{_DEREGISTER_PATH}?{_PID_PARAM}={pid}"
        _log.info("Unregistering process with %s=%d in OTEL Collector Crash Reporter", _PID_PARAM, pid)
        self._get(url, f"failed to deregister {_PID_PARAM}={pid} in the OTEL Collector Crash Reporter")


def create_client(host: str, port: int) -> CrashReporterClient:
    """A client for the crash reporter at ``host``:``port``."""
    if not host:
        raise ValueError("host cannot be empty")
    if port <= 0:
        raise ValueError("port must be greater than zero")
    return CrashReporterClient(f"http://{host}:{port}")