"""
End-to-end tests for the hook driving real wrapper scripts.

A shell stand-in for the resource monitor parses the monitor's options, runs
the wrapped command and writes a summary log, so every callback sees the
files a real run would leave behind.
"""

import os
import subprocess

import pytest

from rmhook.config import EXE_OPTION, LOG_DIR_OPTION, LOG_FORMAT_OPTION, TIME_SERIES_OPTION
from rmhook.hook import RM_OVERFLOW, HookResult, ResourceMonitorHook
from rmhook.models import (
    AllocationLabel,
    BatchQueue,
    BatchTask,
    Dag,
    DagNode,
    NodeState,
    ResourceSummary,
    TaskInfo,
)
from rmhook.storage import load_series

SCRIPTED_MONITOR = """#!/bin/sh
prefix=""
series=""
limits=""
while [ "$#" -gt 0 ]; do
    case "$1" in
        -o) prefix="$2"; shift 2 ;;
        -L) limits="$limits $2"; shift 2 ;;
        -i|-V) shift 2 ;;
        --with-time-series) series=1; shift ;;
        --) shift; break ;;
        *) shift ;;
    esac
done
"$@"
status=$?
if [ -n "$series" ]; then
    printf '# wall_clock\\tmemory\\n1616444453221286\\t64\\n' > "$prefix.series"
fi
case "$limits" in
    *"memory: 4096 MB"*) ;;
    *)
        if [ -n "$RMHOOK_TEST_OVERFLOW" ]; then
            printf '{"memory": [300, "MB"], "exit_type": "limits", "exit_status": %d, "limits_exceeded": {"memory": [256, "MB"]}}\\n' {overflow} > "$prefix.summary"
            exit {overflow}
        fi
        ;;
esac
printf '{"category": "c1", "memory": [120, "MB"], "wall_time": [0.1, "s"], "exit_status": %d}\\n' "$status" > "$prefix.summary"
exit $status
""".replace("{overflow}", str(RM_OVERFLOW))


@pytest.fixture
def scripted_monitor(tmp_path):
    """A resource monitor stand-in that writes summary and series logs."""
    exe = tmp_path / "resource_monitor"
    exe.write_text(SCRIPTED_MONITOR)
    exe.chmod(0o755)
    return str(exe)


@pytest.fixture
def workflow(scripted_monitor, workdir):
    """A created and started hook with a DAG of one category."""
    options = {
        LOG_DIR_OPTION: "logs",
        LOG_FORMAT_OPTION: "resource-rule-%%",
        EXE_OPTION: scripted_monitor,
        TIME_SERIES_OPTION: 1,
    }
    hook = ResourceMonitorHook()
    assert hook.create(options) is HookResult.SUCCESS
    dag = Dag()
    assert hook.dag_start(dag) is HookResult.SUCCESS
    yield hook, dag
    assert hook.destroy(dag) is HookResult.SUCCESS


def run_task(task, env=None):
    """Run a submitted task the way a local batch queue would."""
    result = subprocess.run([task.command], env={**os.environ, **(env or {})}, check=False)
    task.info = TaskInfo(exited_normally=True, exit_code=result.returncode)
    return result.returncode


def add_node(dag, node_id, command):
    node = dag.add_node(
        DagNode(
            node_id=node_id,
            command=command,
            category=dag.lookup_or_create_category("c1"),
            queue=BatchQueue(type="local"),
        )
    )
    return node, BatchTask(command=command, task_id=node_id)


@pytest.mark.e2e
class TestHookWorkflow:
    """End-to-end tests for the hook lifecycle."""

    def test_successful_rule(self, workflow, workdir):
        hook, dag = workflow
        node, task = add_node(dag, 1, "echo done > out.txt")

        assert hook.node_submit(node, task) is HookResult.SUCCESS
        assert run_task(task) == 0
        assert hook.node_end(node, task) is HookResult.SUCCESS

        assert (workdir / "out.txt").read_text() == "done\n"
        assert (workdir / "logs" / "resource-rule-1.summary").is_file()
        assert not (workdir / "resource-rule-1.summary").exists()
        assert node.resources_measured.memory == 120
        assert node.category.count == 1

        series = load_series(workdir / "logs" / "resource-rule-1.series")
        assert series["memory"].to_list() == [64.0]

    def test_overflow_is_retried_with_max_allocation(self, workflow, workdir):
        hook, dag = workflow
        node, task = add_node(dag, 2, "true")
        node.category.first_allocation = ResourceSummary(memory=256)
        node.category.max_allocation = ResourceSummary(memory=4096)
        overflow = {"RMHOOK_TEST_OVERFLOW": "1"}

        hook.node_submit(node, task)
        assert run_task(task, overflow) == RM_OVERFLOW
        node.state = NodeState.FAILED

        assert hook.node_fail(node, task) is HookResult.FAILURE
        assert node.state is NodeState.WAITING
        assert node.resource_request is AllocationLabel.MAX

        retry = BatchTask(command=node.command, task_id=3)
        assert hook.node_submit(node, retry) is HookResult.SUCCESS
        assert run_task(retry, overflow) == 0
        assert hook.node_end(node, retry) is HookResult.SUCCESS

        assert node.resources_measured.exit_status == 0
        assert (workdir / "logs" / "resource-rule-2.summary").is_file()

    def test_overflow_at_max_is_final(self, workflow, workdir):
        hook, dag = workflow
        node, task = add_node(dag, 4, "true")
        node.resource_request = AllocationLabel.MAX

        hook.node_submit(node, task)
        assert run_task(task, {"RMHOOK_TEST_OVERFLOW": "1"}) == RM_OVERFLOW
        node.state = NodeState.FAILED

        assert hook.node_fail(node, task) is HookResult.FAILURE
        assert node.state is NodeState.FAILED
        assert node.resource_request is AllocationLabel.MAX

    def test_failing_command_is_left_to_runtime(self, workflow, workdir):
        hook, dag = workflow
        node, task = add_node(dag, 5, "exit 3")

        hook.node_submit(node, task)
        assert run_task(task) == 3

        assert hook.node_fail(node, task) is HookResult.SUCCESS
        assert node.resource_request is AllocationLabel.FIRST
