"""
The resource monitor hook.

ResourceMonitorHook plugs into the workflow runtime's lifecycle callbacks.
Every node is rewritten to run under the resource monitor; when the node
finishes its summary is folded into the node's category, and when it fails
because it ran out of resources it is sent back to WAITING with a larger
allocation, as long as the category's allocation ladder allows it.

Callbacks run synchronously on the runtime's dispatching path and report a
HookResult. Inside a callback failures are raised as HookError subclasses and
collapsed to HookResult.FAILURE at the callback boundary.
"""

import functools
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import psutil

from ..config.prefixes import (
    REMOTE_RENAME_FEATURE,
    log_prefix_for_node,
    output_prefix_for_node,
)
from ..config.validators import validate_monitor_config
from ..models.config import MonitorConfig
from ..models.runtime import (
    AllocationLabel,
    BatchTask,
    Dag,
    DagNode,
    FileState,
    FileType,
    NodeState,
)
from ..models.summary import ResourceSummary, parse_summary_file
from ..system.commands import write_monitor_command
from ..system.wrapper import BatchWrapper
from ..validation import (
    ConfigError,
    HookError,
    MeasurementAbsent,
    Overflow,
    SetupError,
    WrapFailure,
)
from .relocation import log_extensions, move_output_if_needed

logger = logging.getLogger(__name__)

# Exit code of the resource monitor when the task exceeded a limit.
RM_OVERFLOW = 147

WRAPPER_PREFIX = "./resource_monitor"


class HookResult(Enum):
    """Outcome of a hook callback as reported to the runtime."""
    SUCCESS = "success"
    FAILURE = "failure"


def hook_callback(func: Callable[..., Any]) -> Callable[..., HookResult]:
    """Collapse HookError raised by a callback into HookResult.FAILURE."""

    @functools.wraps(func)
    def wrapper(self: "ResourceMonitorHook", *args: Any, **kwargs: Any) -> HookResult:
        try:
            func(self, *args, **kwargs)
        except Overflow as e:
            logger.debug(f"{self.module_name} {func.__name__}: {e}")
            return HookResult.FAILURE
        except HookError as e:
            logger.error(f"{self.module_name} {func.__name__} failed: {e}")
            return HookResult.FAILURE
        return HookResult.SUCCESS

    return wrapper


class ResourceMonitorHook:
    """
    Wraps every node of a workflow in the resource monitor.

    The hook owns its MonitorConfig, set by ``create`` and released by
    ``destroy``; the other callbacks only read it.
    """

    module_name = "Resource Monitor"

    def __init__(self) -> None:
        self.config: Optional[MonitorConfig] = None

    def _require_config(self) -> MonitorConfig:
        if self.config is None:
            raise HookError(f"{self.module_name} used before create")
        return self.config

    @staticmethod
    def _require_dag(node: DagNode) -> Dag:
        if node.dag is None:
            raise HookError(f"rule {node.node_id} is not attached to a workflow", node_id=node.node_id)
        return node.dag

    # --- Lifecycle -----------------------------------------------------------

    @hook_callback
    def create(self, options: Dict[str, Any]) -> None:
        """Parse the options, locate the monitor and validate the settings."""
        try:
            self.config = validate_monitor_config(options)
        except ConfigError:
            self.config = None
            raise

    @hook_callback
    def destroy(self, dag: Optional[Dag] = None) -> None:
        self.config = None

    @hook_callback
    def dag_start(self, dag: Dag) -> None:
        """
        Create the log directory and register it in the file table.

        Failing to create the directory is logged but does not stop the
        workflow.
        """
        config = self._require_config()
        dag.lookup_or_create_file(config.exe, FileType.GLOBAL)

        try:
            _create_log_dir(config.log_dir)
        except SetupError as e:
            logger.error(f"Monitor mode was enabled, but could not create output directory. {e}")
            return

        log_dir = dag.lookup_or_create_file(config.log_dir)
        dag.log_file_state_change(log_dir, FileState.EXISTS)

    # --- Nodes ---------------------------------------------------------------

    @hook_callback
    def node_submit(self, node: DagNode, task: BatchTask) -> None:
        """Rewrite the task to run under the monitor and declare its logs."""
        config = self._require_config()
        dag = self._require_dag(node)

        dag.add_input_file(task, config.exe, config.exe_remote, FileType.GLOBAL)

        if node.queue.supports_feature(REMOTE_RENAME_FEATURE):
            executable = f"./{config.exe_remote}"
        else:
            executable = config.exe

        log_prefix = log_prefix_for_node(config, node.node_id)
        for extension in log_extensions(config):
            dag.add_output_file(task, f"{log_prefix}.{extension}", None, FileType.INTERMEDIATE)

        category_name = node.category.name.replace("'", "'\\''")
        extra_options = f"-V 'category:{category_name}'"
        output_prefix = output_prefix_for_node(config, node.node_id, node.queue)

        command = write_monitor_command(
            executable,
            output_prefix,
            limits=node.dynamic_label(),
            extra_options=extra_options,
            debug=config.enable_debug,
            time_series=config.enable_time_series,
            list_files=config.enable_list_files,
            interval=config.interval,
        )
        task.wrap_command(command)

        wrapper = BatchWrapper(WRAPPER_PREFIX)
        wrapper.cmd(task.command)
        wrapper_name = wrapper.write()
        if not wrapper_name:
            raise WrapFailure(f"Failed to create wrapper for rule {node.node_id}", node_id=node.node_id)

        task.set_command(wrapper_name)
        wrapper_file = dag.add_input_file(task, wrapper_name, wrapper_name, FileType.TEMP)
        logger.debug(f"Wrapper written to {wrapper_file.filename}")
        dag.log_file_state_change(wrapper_file, FileState.EXISTS)

    @hook_callback
    def node_end(self, node: DagNode, task: BatchTask) -> None:
        """
        Fold the node's measurement into its category and move its logs.

        A missing or unreadable summary is only logged: the node itself
        succeeded, and nothing is moved since the logs are not there.
        """
        config = self._require_config()
        try:
            measured = _read_measurement(config, node)
        except MeasurementAbsent as e:
            node.resources_measured = None
            logger.warning(f"Resource Monitor failed to measure resources. {e}")
            return

        node.resources_measured = measured
        node.category.accumulate_summary(measured)

        move_output_if_needed(config, node, node.queue)

    @hook_callback
    def node_fail(self, node: DagNode, task: BatchTask) -> None:
        """
        Resubmit a node that ran out of resources with a larger allocation.

        Failures that are neither a monitor overflow nor an exhausted disk
        allocation are left to the runtime and other hooks.
        """
        config = self._require_config()
        info = task.info

        if info.disk_allocation_exhausted:
            _report_disk_exhaustion(config, node)
            disk_exhausted = True
        elif info.exit_code == RM_OVERFLOW:
            logger.debug(f"rule {node.node_id} failed because it exceeded the resources limits.")
            measured = node.resources_measured
            if measured is not None and measured.limits_exceeded is not None:
                logger.debug(measured.limits_exceeded.to_string(pprint=True))
            disk_exhausted = False
        else:
            return

        next_label = node.category.next_label(
            node.resource_request,
            True,
            node.resources_requested,
            node.resources_measured,
        )

        if next_label is AllocationLabel.ERROR:
            logger.error(f"rule {node.node_id} cannot be given a larger resource allocation.")
            raise Overflow(
                f"rule {node.node_id} exhausted its allocation ladder",
                node_id=node.node_id,
                disk_exhausted=disk_exhausted,
            )

        logger.debug(f"Rule {node.node_id} resubmitted using new resource allocation.")
        node.resource_request = next_label
        self._require_dag(node).log_state_change(node, NodeState.WAITING)
        raise Overflow(
            f"rule {node.node_id} resubmitted with allocation '{next_label.value}'",
            node_id=node.node_id,
            disk_exhausted=disk_exhausted,
        )


def _create_log_dir(log_dir: str) -> None:
    path = Path(log_dir)
    try:
        path.mkdir(mode=0o777)
    except FileNotFoundError:
        try:
            path.mkdir(mode=0o777, parents=True, exist_ok=True)
        except OSError as e:
            raise SetupError(f"{log_dir}: {e.strerror}") from e
    except FileExistsError:
        pass
    except OSError as e:
        raise SetupError(f"{log_dir}: {e.strerror}") from e

    if not path.is_dir():
        raise SetupError(f"{log_dir} exists but is not a directory")


def _read_measurement(config: MonitorConfig, node: DagNode) -> ResourceSummary:
    output_prefix = output_prefix_for_node(config, node.node_id, node.queue)
    summary_name = f"{output_prefix}.summary"
    measured = parse_summary_file(summary_name)
    if measured is None:
        raise MeasurementAbsent(f"{summary_name} is missing or malformed", node_id=node.node_id)
    return measured


def _report_disk_exhaustion(config: MonitorConfig, node: DagNode) -> None:
    print(
        f"\nrule {node.node_id} failed because it exceeded its disk allocation capacity.",
        file=sys.stderr,
    )
    if node.resources_measured is not None:
        print(node.resources_measured.to_string(pprint=False), file=sys.stderr)
        print(file=sys.stderr)

    try:
        usage = psutil.disk_usage(config.log_dir)
    except OSError as e:
        logger.debug(f"Could not read disk usage of {config.log_dir}: {e}")
        return
    logger.info(
        f"Free space on the filesystem of {config.log_dir}: "
        f"{usage.free / (1024 * 1024):.0f} MB ({100 - usage.percent:.1f}% free)"
    )
