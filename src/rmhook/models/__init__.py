"""
Data models used by the resource monitor hook.

Configuration Models:
- The hook's monitor configuration

Measurement Models:
- Resource summaries parsed from the monitor's summary log

Runtime Models:
- The workflow runtime surface touched by the hook: DAG file table and
  state log, nodes, categories, batch tasks and queue capabilities
"""

from .config import DEFAULT_INTERVAL, DEFAULT_LOG_FORMAT, REMOTE_MONITOR_NAME, MonitorConfig
from .runtime import (
    AllocationLabel,
    AllocationMode,
    BatchQueue,
    BatchTask,
    Category,
    Dag,
    DagFile,
    DagNode,
    FileState,
    FileType,
    NodeState,
    StateChange,
    TaskFile,
    TaskInfo,
    limits_to_options,
)
from .summary import FIELD_UNITS, ResourceSummary, parse_summary_file

__all__ = [
    # Configuration
    "DEFAULT_INTERVAL",
    "DEFAULT_LOG_FORMAT",
    "REMOTE_MONITOR_NAME",
    "MonitorConfig",
    # Measurements
    "FIELD_UNITS",
    "ResourceSummary",
    "parse_summary_file",
    # Runtime
    "AllocationLabel",
    "AllocationMode",
    "BatchQueue",
    "BatchTask",
    "Category",
    "Dag",
    "DagFile",
    "DagNode",
    "FileState",
    "FileType",
    "NodeState",
    "StateChange",
    "TaskFile",
    "TaskInfo",
    "limits_to_options",
]
