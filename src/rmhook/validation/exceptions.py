"""
Exception types and error handling helpers.

This module provides the validation error used by the configuration layer and
the tagged error kinds raised inside hook callbacks. Callbacks collapse these
into a binary success/failure result at their boundary.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type used throughout the validation system.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class HookError(Exception):
    """Base class for errors raised inside resource monitor hook callbacks."""

    def __init__(self, message: str, node_id: Optional[int] = None):
        super().__init__(message)
        self.node_id = node_id


class ConfigError(HookError, ValidationError):
    """Missing or invalid option, or the sidecar binary could not be found."""

    def __init__(self, message: str, field_name: Optional[str] = None, value: Any = None):
        HookError.__init__(self, message)
        self.field_name = field_name
        self.value = value
        self.severity = ErrorSeverity.CRITICAL


class SetupError(HookError):
    """The log directory could not be created."""


class WrapFailure(HookError):
    """The wrapper script for a node could not be generated."""


class MeasurementAbsent(HookError):
    """The summary file of a node is missing or could not be parsed."""


class RelocationFailure(HookError):
    """A monitor log could not be moved into the log directory."""

    def __init__(self, message: str, old_path: str, new_path: str,
                 node_id: Optional[int] = None):
        super().__init__(message, node_id=node_id)
        self.old_path = old_path
        self.new_path = new_path


class Overflow(HookError):
    """A node exceeded its resource limits or its disk allocation."""

    def __init__(self, message: str, node_id: Optional[int] = None,
                 disk_exhausted: bool = False):
        super().__init__(message, node_id=node_id)
        self.disk_exhausted = disk_exhausted


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)
