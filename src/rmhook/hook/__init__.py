"""
Resource monitor hook for the workflow runtime.

The hook wraps every node in the resource monitor, collects the measured
resources after completion and escalates the allocation of nodes that
overflowed their limits.
"""

from .hook import RM_OVERFLOW, WRAPPER_PREFIX, HookResult, ResourceMonitorHook, hook_callback
from .relocation import log_extensions, move_output_if_needed

__all__ = [
    "RM_OVERFLOW",
    "WRAPPER_PREFIX",
    "HookResult",
    "ResourceMonitorHook",
    "hook_callback",
    "log_extensions",
    "move_output_if_needed",
]
