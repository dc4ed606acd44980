"""
Configuration data models.

This module contains the configuration record of the resource monitor hook,
built once when the hook is created and read-only afterwards.
"""

from dataclasses import dataclass

DEFAULT_LOG_FORMAT = "resource-rule-%%"
DEFAULT_INTERVAL = 1
REMOTE_MONITOR_NAME = "cctools-monitor"


@dataclass(frozen=True)
class MonitorConfig:
    """
    Settings of the resource monitor hook, built from the runtime options.
    """

    # Directory where all monitor logs end up.
    log_dir: str
    # Absolute path of the resource monitor executable on the submit host.
    exe: str
    # Log file name template; '%%' is replaced by the node id.
    log_format: str = DEFAULT_LOG_FORMAT
    # Sampling period of the monitor, in seconds.
    interval: int = DEFAULT_INTERVAL
    enable_time_series: bool = False
    enable_list_files: bool = False
    enable_debug: bool = False
    # Name of the executable on the execution host when the queue can rename inputs.
    exe_remote: str = REMOTE_MONITOR_NAME

    @property
    def log_prefix(self) -> str:
        """``{log_dir}/{log_format}``, still containing the '%%' marker."""
        return f"{self.log_dir}/{self.log_format}"
