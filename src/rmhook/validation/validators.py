"""
Validation functions for hook options.

These helpers check individual option values and raise ValidationError with
the offending field name so configuration failures point at the right key.
"""

import os
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import ValidationError

LOG_FORMAT_MARKER = "%%"


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_boolean_flag(value: Any, field_name: str = "flag") -> bool:
    """
    Validate a boolean option that may also be given as an integer.

    Options coming from the workflow runtime encode booleans as 0/1, while
    TOML files use true/false. Integer strings such as "1" from a command
    line are accepted too.

    Raises:
        ValidationError: If the value is neither a bool nor an integer, or
            a string holding one
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        try:
            return int(value.strip()) != 0
        except ValueError:
            pass
    raise ValidationError(
        f"{field_name} must be a boolean or an integer, got {value!r}",
        field_name=field_name,
        value=value
    )


def validate_log_format(log_format: Any, field_name: str = "log_format") -> str:
    """
    Validate a log file name template.

    The template must be a non-empty string containing exactly one ``%%``
    marker, which is later replaced by the node id.
    """
    if not isinstance(log_format, str) or not log_format.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=log_format
        )

    count = log_format.count(LOG_FORMAT_MARKER)
    if count != 1:
        raise ValidationError(
            f"{field_name} must contain exactly one '{LOG_FORMAT_MARKER}' marker, "
            f"found {count}: {log_format}",
            field_name=field_name,
            value=log_format
        )
    return log_format


def validate_executable(path: Union[str, Path], field_name: str = "executable") -> str:
    """
    Validate that a path names a readable regular file.

    Returns:
        The absolute path as a string

    Raises:
        ValidationError: If the path is missing, not a file, or unreadable
    """
    path_str = str(path)
    if not os.path.isfile(path_str):
        raise ValidationError(
            f"{field_name} is not a regular file: {path_str}",
            field_name=field_name,
            value=path_str
        )
    if not os.access(path_str, os.R_OK):
        raise ValidationError(
            f"{field_name} is not readable: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return os.path.abspath(path_str)
