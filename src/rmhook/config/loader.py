"""
Configuration file loading utilities.

This module handles loading hook options from a TOML file. The options live in
a ``[resource_monitor]`` table whose keys are the runtime option names without
their ``resource_monitor_`` prefix:

    [resource_monitor]
    log_dir = "logs"
    interval = 5
    enable_time_series = true
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)

OPTION_PREFIX = "resource_monitor_"
TOML_TABLE = "resource_monitor"


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file with error handling.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the file is malformed
    """
    logger.info(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        logger.error(f"{description} not found: {file_path}")
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def load_hook_options(file_path: Path) -> Dict[str, Any]:
    """
    Load resource monitor options from a TOML file.

    Args:
        file_path: Path to a TOML file with a ``[resource_monitor]`` table

    Returns:
        Flat option dictionary keyed like the runtime options
        (``resource_monitor_log_dir``, ...). Empty if the table is absent.
    """
    data = load_toml_file(Path(file_path), "resource monitor configuration file")
    table = data.get(TOML_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"[{TOML_TABLE}] in {file_path} must be a table")

    options = {f"{OPTION_PREFIX}{key}": value for key, value in table.items()}
    logger.debug(f"Loaded {len(options)} resource monitor options from {file_path}")
    return options
