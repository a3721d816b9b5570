"""Error types raised by the server SDK, and the internal service outcome."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple, Optional, Union


class GameLiftErrorType(IntEnum):
    """Kinds of errors the server SDK reports."""

    ALREADY_INITIALIZED = 0
    FLEET_MISMATCH = 1
    GAMELIFT_CLIENT_NOT_INITIALIZED = 2
    GAMELIFT_SERVER_NOT_INITIALIZED = 3
    GAME_SESSION_ENDED_FAILED = 4
    GAME_SESSION_NOT_READY = 5
    GAME_SESSION_READY_FAILED = 6
    GAME_SESSION_ID_NOT_SET = 7
    INITIALIZATION_MISMATCH = 8
    NOT_INITIALIZED = 9
    NO_TARGET_ALIAS_ID_SET = 10
    NO_TARGET_FLEET_SET = 11
    PROCESS_ENDING_FAILED = 12
    PROCESS_NOT_ACTIVE = 13
    PROCESS_NOT_READY = 14
    PROCESS_READY_FAILED = 15
    SDK_VERSION_DETECTION_FAILED = 16
    SERVICE_CALL_FAILED = 17
    UNEXPECTED_PLAYER_SESSION = 18
    LOCAL_CONNECTION_FAILED = 19
    NETWORK_NOT_INITIALIZED = 20
    TERMINATION_TIME_NOT_SET = 21
    BAD_REQUEST_EXCEPTION = 22
    UNAUTHORIZED_EXCEPTION = 23
    FORBIDDEN_EXCEPTION = 24
    NOT_FOUND_EXCEPTION = 25
    CONFLICT_EXCEPTION = 26
    TOO_MANY_REQUESTS_EXCEPTION = 27
    INTERNAL_SERVICE_EXCEPTION = 28
    VALIDATION_EXCEPTION = 29
    WEBSOCKET_CONNECT_FAILURE = 30
    WEBSOCKET_RETRIABLE_SEND_MESSAGE_FAILURE = 31
    WEBSOCKET_SEND_MESSAGE_FAILURE = 32
    WEBSOCKET_CLOSING_ERROR = 33
    UNKNOWN_EXCEPTION = 34
    METRIC_TRANSPORT_EXCEPTION = 35
    METRIC_CONFIGURATION_EXCEPTION = 36
    METRIC_UNSUPPORTED_TYPE_EXCEPTION = 37


class ErrorDescription(NamedTuple):
    name: str
    message: str


_NOT_INITIALIZED = "You must call InitSDK() before making calls to the server SDK for Amazon GameLift Servers."
_WS_SEND_FAILED = "Sending Message to the Amazon GameLift Servers websocket has failed"

_T = GameLiftErrorType

ERROR_DESCRIPTIONS: dict[GameLiftErrorType, ErrorDescription] = {
    _T.ALREADY_INITIALIZED: ErrorDescription(
        "Already Initialized",
        "Server SDK has already been initialized. You must call Destroy() before reinitializing the server SDK.",
    ),
    _T.FLEET_MISMATCH: ErrorDescription(
        "Fleet mismatch.",
        "The Target fleet does not match the request fleet. "
        "Make sure GameSessions and PlayerSessions belong to your target fleet.",
    ),
    _T.GAMELIFT_CLIENT_NOT_INITIALIZED: ErrorDescription("Sever SDK not initialized.", _NOT_INITIALIZED),
    _T.GAMELIFT_SERVER_NOT_INITIALIZED: ErrorDescription("Server SDK not initialized.", _NOT_INITIALIZED),
    _T.GAME_SESSION_ENDED_FAILED: ErrorDescription(
        "Game session failed.", "The GameSessionEnded invocation failed."
    ),
    _T.GAME_SESSION_NOT_READY: ErrorDescription(
        "Game session not activated.", "The Game session associated with this server was not activated."
    ),
    _T.GAME_SESSION_READY_FAILED: ErrorDescription(
        "Game session failed.", "The GameSessionReady invocation failed."
    ),
    _T.GAME_SESSION_ID_NOT_SET: ErrorDescription(
        "GameSession id is not set.", "No game sessions are bound to this process."
    ),
    _T.INITIALIZATION_MISMATCH: ErrorDescription("Server SDK not initialized.", _NOT_INITIALIZED),
    _T.NOT_INITIALIZED: ErrorDescription("Server SDK not initialized.", _NOT_INITIALIZED),
    _T.NO_TARGET_ALIAS_ID_SET: ErrorDescription(
        "No target aliasId set.",
        "The aliasId has not been set. Clients should call SetTargetAliasId() before making calls that require an alias.",
    ),
    _T.NO_TARGET_FLEET_SET: ErrorDescription(
        "No target fleet set.",
        "The target fleet has not been set. Clients should call SetTargetFleet() before making calls that require a fleet.",
    ),
    _T.PROCESS_ENDING_FAILED: ErrorDescription(
        "Process ending failed.", "The server SDK call to ProcessEnding() failed."
    ),
    _T.PROCESS_NOT_ACTIVE: ErrorDescription(
        "Process not activated.", "The process has not yet been activated."
    ),
    _T.PROCESS_NOT_READY: ErrorDescription(
        "Process not ready.",
        "The process has not yet been activated by calling ProcessReady(). "
        "Processes in standby cannot receive StartGameSession callbacks.",
    ),
    _T.PROCESS_READY_FAILED: ErrorDescription(
        "Process ready failed.", "The server SDK call to ProcessEnding() failed."
    ),
    _T.SDK_VERSION_DETECTION_FAILED: ErrorDescription(
        "Could not detect SDK version.", "Could not detect SDK version."
    ),
    _T.SERVICE_CALL_FAILED: ErrorDescription(
        "Service call failed.",
        "The call to an AWS service has failed. See the root cause error for more information.",
    ),
    _T.UNEXPECTED_PLAYER_SESSION: ErrorDescription(
        "Unexpected player session.",
        "The player session was not expected by the server. "
        "Clients wishing to connect to a server must obtain a PlayerSessionID from Amazon GameLift Servers "
        "by creating a player session on the desired game session.",
    ),
    _T.LOCAL_CONNECTION_FAILED: ErrorDescription(
        "Local connection failed.", "Connection to the game server could not be established."
    ),
    _T.NETWORK_NOT_INITIALIZED: ErrorDescription(
        "Network not initialized.", "Local network was not initialized. Have you called InitSDK()?"
    ),
    _T.TERMINATION_TIME_NOT_SET: ErrorDescription(
        "TerminationTime is not set.", "TerminationTime has not been sent to this process."
    ),
    _T.BAD_REQUEST_EXCEPTION: ErrorDescription("Bad request exception.", "Bad request exception."),
    _T.UNAUTHORIZED_EXCEPTION: ErrorDescription(
        "Unauthorized exception.",
        "User provided invalid or missing authorization to access a resource/operation.",
    ),
    _T.FORBIDDEN_EXCEPTION: ErrorDescription(
        "Forbidden exception.",
        "User is attempting to access resources/operations that they are not allowed to access.",
    ),
    _T.NOT_FOUND_EXCEPTION: ErrorDescription(
        "Not found exception.",
        "A necessary resource was missing when attempting to process the request.",
    ),
    _T.CONFLICT_EXCEPTION: ErrorDescription(
        "Conflict exception.", "Request conflicts with the current state of the target resource."
    ),
    _T.TOO_MANY_REQUESTS_EXCEPTION: ErrorDescription(
        "Throttling exception.", "Too many requests; please increase throttle limit if needed."
    ),
    _T.INTERNAL_SERVICE_EXCEPTION: ErrorDescription(
        "Internal service exception.", "Internal service exception."
    ),
    _T.VALIDATION_EXCEPTION: ErrorDescription("Validation exception.", "Validation exception."),
    _T.WEBSOCKET_CONNECT_FAILURE: ErrorDescription(
        "WebSocket Connection Failed", "Connection to the Amazon GameLift Servers websocket has failed"
    ),
    _T.WEBSOCKET_RETRIABLE_SEND_MESSAGE_FAILURE: ErrorDescription(
        "WebSocket Send Message Failed", _WS_SEND_FAILED
    ),
    _T.WEBSOCKET_SEND_MESSAGE_FAILURE: ErrorDescription("WebSocket Send Message Failed", _WS_SEND_FAILED),
    _T.WEBSOCKET_CLOSING_ERROR: ErrorDescription(
        "WebSocket close error", "An error has occurred in closing the connection"
    ),
    _T.UNKNOWN_EXCEPTION: ErrorDescription("Unknown exception.", "Unknown exception."),
    _T.METRIC_TRANSPORT_EXCEPTION: ErrorDescription(
        "Metric transport exception.", "Failed to send metric via transport."
    ),
    _T.METRIC_CONFIGURATION_EXCEPTION: ErrorDescription(
        "Metric configuration exception.", "Invalid metric configuration or setup."
    ),
    _T.METRIC_UNSUPPORTED_TYPE_EXCEPTION: ErrorDescription(
        "Metric unsupported type exception.", "Unsupported metric type."
    ),
}

_STATUS_CODE_TYPES = {
    400: _T.BAD_REQUEST_EXCEPTION,
    401: _T.UNAUTHORIZED_EXCEPTION,
    403: _T.FORBIDDEN_EXCEPTION,
    404: _T.NOT_FOUND_EXCEPTION,
    409: _T.CONFLICT_EXCEPTION,
    429: _T.TOO_MANY_REQUESTS_EXCEPTION,
}

_TYPE_IN_MESSAGE = re.compile(r"\[GameLiftError: ErrorType=\{([+-]?[0-9]+)\}")


class GameLiftError(Exception):
    """An error in a call to the server SDK."""

    def __init__(
        self,
        error_type: Union[GameLiftErrorType, int],
        name: str = "",
        message: str = "",
    ) -> None:
        try:
            error_type = GameLiftErrorType(error_type)
        except ValueError:
            error_type = int(error_type)
        super().__init__(error_type, name, message)
        self.error_type = error_type
        self._name = name
        self._message = message

    @property
    def name(self) -> str:
        """The given name, or the default name for the error type."""
        if self._name:
            return self._name
        description = ERROR_DESCRIPTIONS.get(self.error_type)
        return description.name if description else "Unknown Error"

    @property
    def message(self) -> str:
        """The given message, or the default message for the error type."""
        if self._message:
            return self._message
        description = ERROR_DESCRIPTIONS.get(self.error_type)
        return description.message if description else "An unexpected error has occurred."

    def __str__(self) -> str:
        return (
            f"[GameLiftError: ErrorType={{{int(self.error_type)}}}, "
            f"ErrorName={{{self.name}}}, ErrorMessage={{{self.message}}}]"
        )


def _error_type_for_status_code(status_code: int) -> GameLiftErrorType:
    if 400 <= status_code < 500:
        return _STATUS_CODE_TYPES.get(status_code, _T.BAD_REQUEST_EXCEPTION)
    return _T.INTERNAL_SERVICE_EXCEPTION


def error_from_status_code(status_code: int, error_message: str) -> GameLiftError:
    """Build the error that corresponds to an HTTP-like status code."""
    return GameLiftError(_error_type_for_status_code(status_code), "", error_message)


def error_type_from_message(error_message: str) -> GameLiftErrorType:
    """Recover the error type from the text of a formatted GameLiftError."""
    match = _TYPE_IN_MESSAGE.match(error_message)
    if match is None:
        return _T.UNKNOWN_EXCEPTION
    try:
        return GameLiftErrorType(int(match.group(1)))
    except ValueError:
        return _T.UNKNOWN_EXCEPTION


@dataclass
class Outcome:
    """A service response for internal use: raw data or an error."""

    data: bytes = b""
    error: Optional[BaseException] = None