"""
rmhook: Resource monitor hook for workflow runtimes.

This package wraps every job of a workflow in the resource monitor sidecar,
reads back the measured resources when the job completes, and resubmits jobs
that overflowed their allocation with a larger one.

The package is organized into specialized modules:
- config: Option loading, validation and per-node log prefixes
- models: Configuration, resource summaries and the runtime surface
- validation: Validators and the hook's error kinds
- system: Monitor location, command construction and wrapper scripts
- hook: The lifecycle callbacks and log relocation
- storage: Time series and measurement tables as Polars DataFrames

Usage:
    from rmhook import ResourceMonitorHook, HookResult

    hook = ResourceMonitorHook()
    if hook.create({"resource_monitor_log_dir": "logs"}) is HookResult.FAILURE:
        raise SystemExit(1)
"""

# Main interfaces
from .hook import HookResult, ResourceMonitorHook, move_output_if_needed
from .config import (
    load_hook_options,
    log_prefix_for_node,
    output_prefix_for_node,
    validate_monitor_config,
)
from .log_config import configure_logging

# Model classes for external use
from .models import (
    AllocationLabel,
    BatchQueue,
    BatchTask,
    Category,
    Dag,
    DagNode,
    MonitorConfig,
    ResourceSummary,
    parse_summary_file,
)

# Validation utilities
from .validation import ConfigError, HookError, ValidationError

# Retained logs
from .storage import load_series, measurements_frame, save_measurements

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "HookResult",
    "ResourceMonitorHook",
    "move_output_if_needed",
    "load_hook_options",
    "log_prefix_for_node",
    "output_prefix_for_node",
    "validate_monitor_config",
    "configure_logging",
    # Models
    "AllocationLabel",
    "BatchQueue",
    "BatchTask",
    "Category",
    "Dag",
    "DagNode",
    "MonitorConfig",
    "ResourceSummary",
    "parse_summary_file",
    # Validation
    "ConfigError",
    "HookError",
    "ValidationError",
    # Storage
    "load_series",
    "measurements_frame",
    "save_measurements",
]
