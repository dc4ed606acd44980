"""
Command construction utilities for the resource monitor.

This module provides functions for locating the resource monitor executable,
building the command line that runs a task under the monitor, and nesting one
command inside another.
"""

import logging
import os
import shlex
import shutil
from typing import Optional

from ..models.runtime import limits_to_options
from ..models.summary import ResourceSummary
from ..validation import ValidationError, validate_executable

logger = logging.getLogger(__name__)

MONITOR_EXECUTABLE = "resource_monitor"
MONITOR_ENV_VAR = "CCTOOLS_RESOURCE_MONITOR"

# Placeholders understood by wrap_command.
QUOTED_PLACEHOLDER = "{}"
RAW_PLACEHOLDER = "[]"


def _check_monitor_path(path: str) -> Optional[str]:
    try:
        return validate_executable(path, field_name="resource monitor")
    except ValidationError as e:
        logger.debug(f"Resource monitor candidate rejected: {e}")
        return None


def locate_resource_monitor(path: Optional[str] = None) -> Optional[str]:
    """Locate the resource monitor executable on the submit host.

    The search order is: an explicitly given path, the path named by the
    ``CCTOOLS_RESOURCE_MONITOR`` environment variable, then
    ``resource_monitor`` on ``PATH``.

    Args:
        path: Optional explicit location, typically from the options.

    Returns:
        Absolute path of the executable, or None if it cannot be found.
    """
    logger.debug("Locating resource monitor executable...")

    if path:
        logger.debug(f"Trying monitor path provided: {path}")
        return _check_monitor_path(path)

    env_path = os.environ.get(MONITOR_ENV_VAR)
    if env_path:
        logger.debug(f"Trying monitor from ${MONITOR_ENV_VAR}: {env_path}")
        checked = _check_monitor_path(env_path)
        if checked:
            return checked

    found = shutil.which(MONITOR_EXECUTABLE)
    if found:
        logger.debug(f"Found monitor in PATH: {found}")
        return os.path.abspath(found)

    return None


def write_monitor_command(
    executable: str,
    output_prefix: str,
    limits: Optional[ResourceSummary] = None,
    extra_options: Optional[str] = None,
    debug: bool = False,
    time_series: bool = False,
    list_files: bool = False,
    interval: int = 1,
) -> str:
    """Build the command line that runs a task under the resource monitor.

    The returned string ends with the ``{}`` placeholder, to be filled in
    with the task's own command by wrap_command.

    Args:
        executable: Path of the monitor as seen by the execution host.
        output_prefix: Prefix of the .summary/.series/.files logs.
        limits: Resource limits to enforce, one -L option per set field.
        extra_options: Pre-formatted options appended verbatim (e.g. "-V 'k:v'").
        debug: Ask the monitor for debug output.
        time_series: Ask for the .series log.
        list_files: Ask for the .files log.
        interval: Sampling interval in seconds.

    Examples:
        >>> write_monitor_command("/bin/rm_mon", "r-7", interval=5)
        '/bin/rm_mon -i 5 -o r-7 -- /bin/sh -c {}'
    """
    parts = [shlex.quote(executable)]

    if debug:
        parts.append("--debug")
    if time_series:
        parts.append("--with-time-series")
    if list_files:
        parts.append("--with-file-lists")

    parts.extend(["-i", str(interval)])
    parts.extend(["-o", shlex.quote(output_prefix)])

    if extra_options:
        parts.append(extra_options)

    for name, value in limits_to_options(limits):
        parts.extend(["-L", shlex.quote(f"{name}: {value}")])

    parts.extend(["--", "/bin/sh", "-c", QUOTED_PLACEHOLDER])
    return " ".join(parts)


def wrap_command(command: str, wrapper: Optional[str]) -> str:
    """Nest ``command`` inside ``wrapper``.

    A ``{}`` in the wrapper is replaced by the shell-quoted command, a ``[]``
    by the command as is. A wrapper without placeholder gets the command
    appended as ``/bin/sh -c <command>``. Applying several wrappers in turn
    nests them, the last one outermost.

    Examples:
        >>> wrap_command("echo hi", "time {}")
        "time 'echo hi'"
        >>> wrap_command("echo hi", "env []")
        'env echo hi'
    """
    if not wrapper:
        return command

    if QUOTED_PLACEHOLDER in wrapper:
        head, _, tail = wrapper.rpartition(QUOTED_PLACEHOLDER)
        return f"{head}{shlex.quote(command)}{tail}"
    if RAW_PLACEHOLDER in wrapper:
        head, _, tail = wrapper.rpartition(RAW_PLACEHOLDER)
        return f"{head}{command}{tail}"
    return f"{wrapper} /bin/sh -c {shlex.quote(command)}"
