"""
Validation and error handling for the rmhook package.

This module provides option validation and the error kinds raised by the
resource monitor hook, with consistent error reporting across callbacks.
"""

from .exceptions import (
    ConfigError,
    ErrorSeverity,
    HookError,
    MeasurementAbsent,
    Overflow,
    RelocationFailure,
    SetupError,
    ValidationError,
    WrapFailure,
    handle_config_error,
    handle_error,
    handle_file_error,
)
from .validators import (
    LOG_FORMAT_MARKER,
    validate_boolean_flag,
    validate_executable,
    validate_log_format,
    validate_positive_integer,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorSeverity",
    "HookError",
    "MeasurementAbsent",
    "Overflow",
    "RelocationFailure",
    "SetupError",
    "ValidationError",
    "WrapFailure",
    "handle_config_error",
    "handle_error",
    "handle_file_error",
    # Validators
    "LOG_FORMAT_MARKER",
    "validate_boolean_flag",
    "validate_executable",
    "validate_log_format",
    "validate_positive_integer",
]
