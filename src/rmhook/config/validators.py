"""
Configuration validation for the resource monitor hook.

This module turns the generic key-value options handed over by the workflow
runtime into a validated MonitorConfig.
"""

import logging
from typing import Any, Dict

from ..models.config import DEFAULT_INTERVAL, DEFAULT_LOG_FORMAT, MonitorConfig
from ..system.commands import locate_resource_monitor
from ..validation import (
    LOG_FORMAT_MARKER,
    ConfigError,
    ValidationError,
    validate_boolean_flag,
    validate_log_format,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_DIR_OPTION = "resource_monitor_log_dir"
LOG_FORMAT_OPTION = "resource_monitor_log_format"
INTERVAL_OPTION = "resource_monitor_interval"
TIME_SERIES_OPTION = "resource_monitor_enable_time_series"
LIST_FILES_OPTION = "resource_monitor_enable_list_files"
DEBUG_OPTION = "resource_monitor_enable_debug"
EXE_OPTION = "resource_monitor_exe"


def validate_monitor_config(options: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from runtime options.

    Args:
        options: Key-value options, e.g. from the command line or a TOML file

    Returns:
        Validated MonitorConfig instance

    Raises:
        ConfigError: If an option is missing or invalid, or the resource
            monitor executable cannot be found
    """
    try:
        log_dir = options.get(LOG_DIR_OPTION)
        if not isinstance(log_dir, str) or not log_dir.strip():
            raise ValidationError(
                "Monitor mode was enabled, but a log output directory was not specified",
                field_name=LOG_DIR_OPTION,
                value=log_dir,
            )
        if LOG_FORMAT_MARKER in log_dir:
            raise ValidationError(
                f"{LOG_DIR_OPTION} must not contain '{LOG_FORMAT_MARKER}': {log_dir}",
                field_name=LOG_DIR_OPTION,
                value=log_dir,
            )

        log_format = options.get(LOG_FORMAT_OPTION) or DEFAULT_LOG_FORMAT
        log_format = validate_log_format(log_format, field_name=LOG_FORMAT_OPTION)

        interval = options.get(INTERVAL_OPTION)
        if interval is None:
            interval = DEFAULT_INTERVAL
        interval = validate_positive_integer(
            interval,
            min_value=1,
            field_name=INTERVAL_OPTION,
        )

        enable_time_series = validate_boolean_flag(
            options.get(TIME_SERIES_OPTION), field_name=TIME_SERIES_OPTION
        )
        enable_list_files = validate_boolean_flag(
            options.get(LIST_FILES_OPTION), field_name=LIST_FILES_OPTION
        )
        enable_debug = validate_boolean_flag(
            options.get(DEBUG_OPTION), field_name=DEBUG_OPTION
        )

        exe = locate_resource_monitor(options.get(EXE_OPTION))
        if not exe:
            raise ValidationError(
                "Monitor mode was enabled, but could not find resource_monitor in PATH",
                field_name=EXE_OPTION,
                value=options.get(EXE_OPTION),
            )

    except ValidationError as e:
        logger.error(f"Resource monitor configuration validation failed: {e}")
        raise ConfigError(str(e), field_name=e.field_name, value=e.value) from e

    config = MonitorConfig(
        log_dir=log_dir,
        exe=exe,
        log_format=log_format,
        interval=interval,
        enable_time_series=enable_time_series,
        enable_list_files=enable_list_files,
        enable_debug=enable_debug,
    )
    logger.debug(f"Resource monitor configured: prefix={config.log_prefix} exe={config.exe}")
    return config
