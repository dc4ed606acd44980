"""
Configuration management for the rmhook package.

This module provides loading of hook options from TOML files, validation of
options into a MonitorConfig, and the per-node log prefix functions.
"""

from .loader import load_hook_options, load_toml_file
from .prefixes import (
    OUTPUT_DIRECTORIES_FEATURE,
    REMOTE_RENAME_FEATURE,
    log_prefix_for_node,
    output_prefix_for_node,
)
from .validators import (
    DEBUG_OPTION,
    EXE_OPTION,
    INTERVAL_OPTION,
    LIST_FILES_OPTION,
    LOG_DIR_OPTION,
    LOG_FORMAT_OPTION,
    TIME_SERIES_OPTION,
    validate_monitor_config,
)

__all__ = [
    # Loading and validation
    "load_hook_options",
    "load_toml_file",
    "validate_monitor_config",
    # Option names
    "DEBUG_OPTION",
    "EXE_OPTION",
    "INTERVAL_OPTION",
    "LIST_FILES_OPTION",
    "LOG_DIR_OPTION",
    "LOG_FORMAT_OPTION",
    "TIME_SERIES_OPTION",
    # Prefixes
    "OUTPUT_DIRECTORIES_FEATURE",
    "REMOTE_RENAME_FEATURE",
    "log_prefix_for_node",
    "output_prefix_for_node",
]
