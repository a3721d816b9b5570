"""Validation of string input fields."""

from __future__ import annotations

import re
from typing import Optional, Pattern, Union

from glserver.errors import GameLiftError, GameLiftErrorType


def _invalid(message: str) -> GameLiftError:
    return GameLiftError(GameLiftErrorType.VALIDATION_EXCEPTION, "", message)


def validate_string(
    field_name: str,
    value: str,
    pattern: Union[str, Pattern[str], None] = None,
    min_length: int = 0,
    max_length: Optional[int] = None,
    required: bool = False,
    override_error_message: str = "",
) -> None:
    """Check a string field; raise a validation GameLiftError if it is invalid.

    A ``max_length`` of None means there is no upper limit. Lengths are
    counted in UTF-8 bytes.
    """
    if not value:
        if required:
            raise _invalid(f"{field_name} is required.")
        return

    length = len(value.encode("utf-8"))
    if length < min_length or (max_length is not None and length > max_length):
        if max_length is None:
            raise _invalid(f"{field_name} is invalid. Length must be at least {min_length} characters.")
        raise _invalid(
            f"{field_name} is invalid. Length must be between {min_length} and {max_length} characters."
        )

    if pattern is not None:
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        if regex.search(value) is None:
            if override_error_message:
                raise _invalid(override_error_message)
            raise _invalid(f"{field_name} is invalid. Must match the pattern: {regex.pattern}.")