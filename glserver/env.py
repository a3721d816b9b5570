"""Reading typed settings from environment variables."""

from __future__ import annotations

import logging
import os
import re
import uuid
from datetime import timedelta
from fractions import Fraction
from typing import Optional

PROCESS_ID_ENV = "GAMELIFT_SDK_PROCESS_ID"
AGENTLESS_CONTAINER_PROCESS_ID = "ManagedContainerProcess"

_UNIT_NS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_LIMIT = 1 << 63
_COMPONENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _parse_duration_ns(value: str) -> int:
    def invalid() -> ValueError:
        return ValueError(f'time: invalid duration "{value}"')

    text = value
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return 0
    if not text:
        raise invalid()

    total = 0
    pos = 0
    while pos < len(text):
        if not (text[pos] == "." or text[pos].isascii() and text[pos].isdigit()):
            raise invalid()
        match = _COMPONENT.match(text, pos)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise invalid()
        if not unit:
            raise ValueError(f'time: missing unit in duration "{value}"')
        scale = _UNIT_NS.get(unit)
        if scale is None:
            raise ValueError(f'time: unknown unit "{unit}" in duration "{value}"')
        part = int(whole or "0") * scale
        if fraction:
            part += int(Fraction(int(fraction), 10 ** len(fraction)) * scale)
        total += part
        if total > _LIMIT:
            raise invalid()
        pos = match.end()

    if negative:
        return -total
    if total > _LIMIT - 1:
        raise invalid()
    return total


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "300ms", "-1.5h" or "2h45m".

    Valid units are "ns", "us" (or "µs"), "ms", "s", "m" and "h".
    Raises ValueError for malformed input.
    """
    return timedelta(microseconds=_parse_duration_ns(value) / 1000)


def env_str(key: str, default: str) -> str:
    """Return the variable's value, or the default when unset or empty.

    A process id set to the agentless-container marker is replaced by a
    freshly generated UUID.
    """
    value = os.environ.get(key, "")
    if key == PROCESS_ID_ENV and value == AGENTLESS_CONTAINER_PROCESS_ID:
        return str(uuid.uuid4())
    return value or default


def _parse_int64(value: str) -> int:
    if not _INTEGER.fullmatch(value):
        raise ValueError(f'strconv.ParseInt: parsing "{value}": invalid syntax')
    number = int(value)
    if not -_LIMIT <= number < _LIMIT:
        raise ValueError(f'strconv.ParseInt: parsing "{value}": value out of range')
    return number


def env_int(key: str, default: int, logger: Optional[logging.Logger] = None) -> int:
    """Return the variable as an integer, or the default if unset or unparsable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return _parse_int64(value)
    except ValueError as err:
        if logger is not None:
            logger.warning("Error %s when try parse int in %s", err, value)
        return default


def env_duration(key: str, default: timedelta, logger: Optional[logging.Logger] = None) -> timedelta:
    """Return the variable as a duration, or the default if unset or unparsable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return parse_duration(value)
    except ValueError as err:
        if logger is not None:
            logger.warning("Error %s when try parse duration in %s", err, value)
        return default