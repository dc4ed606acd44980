"""
System interaction utilities for the resource monitor hook.

This module provides:

- Location of the resource monitor executable on the submit host
- Construction of the monitor command line for a task
- Composition of nested command wrappers
- Generation of wrapper scripts staged alongside batch tasks
"""

from .commands import (
    MONITOR_ENV_VAR,
    MONITOR_EXECUTABLE,
    locate_resource_monitor,
    wrap_command,
    write_monitor_command,
)
from .wrapper import BatchWrapper

__all__ = [
    "MONITOR_ENV_VAR",
    "MONITOR_EXECUTABLE",
    "locate_resource_monitor",
    "wrap_command",
    "write_monitor_command",
    "BatchWrapper",
]
