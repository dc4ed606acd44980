"""
Pytest configuration and shared fixtures for the rmhook test suite.

This module provides common fixtures for building hooks, workflow nodes and
monitor logs without a real workflow runtime or resource monitor.
"""

import os
import sys
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rmhook.config import EXE_OPTION, LOG_DIR_OPTION  # noqa: E402
from rmhook.hook import HookResult, ResourceMonitorHook  # noqa: E402
from rmhook.models import BatchQueue, BatchTask, Dag, DagNode  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def fake_monitor(tmp_path):
    """An executable stand-in for the resource monitor binary."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    exe = bin_dir / "resource_monitor"
    exe.write_text("#!/bin/sh\nexec \"$@\"\n")
    exe.chmod(0o755)
    return str(exe)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from an empty workflow working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def base_options(fake_monitor):
    """Minimal valid hook options."""
    return {
        LOG_DIR_OPTION: "./logs",
        EXE_OPTION: fake_monitor,
    }


@pytest.fixture
def make_hook(base_options):
    """Factory for created hooks; keyword arguments override options."""

    def _make(**overrides):
        options = dict(base_options)
        options.update({f"resource_monitor_{key}": value for key, value in overrides.items()})
        hook = ResourceMonitorHook()
        assert hook.create(options) is HookResult.SUCCESS
        return hook

    return _make


@pytest.fixture
def make_node():
    """Factory for a node attached to a DAG, with its batch task."""

    def _make(node_id=7, category="c1", features=(), command="echo hi", dag=None):
        dag = dag if dag is not None else Dag()
        node = dag.add_node(
            DagNode(
                node_id=node_id,
                command=command,
                category=dag.lookup_or_create_category(category),
                queue=BatchQueue(features=frozenset(features)),
            )
        )
        task = BatchTask(command=command, task_id=node_id)
        return node, task

    return _make


# ============================================================================
# Monitor Log Fixtures
# ============================================================================


SAMPLE_SUMMARY_JSON = """{
    "executable_type": "dynamic",
    "category": "c1",
    "command": "echo hi",
    "exit_type": "normal",
    "exit_status": 0,
    "cores": [1, "cores"],
    "wall_time": [2.5, "s"],
    "cpu_time": [1500000, "us"],
    "memory": [120, "MB"],
    "disk": [1, "GB"],
    "bytes_read": [3, "MB"],
    "bytes_written": [4, "MB"]
}
"""

SAMPLE_SERIES = """# Units:
# wall_clock in micro seconds
# cpu_time in micro seconds
#
# wall_clock\tcpu_time\tcores\tmemory\tdisk
1616444453221286\t0\t1\t10\t0
1616444454221286\t500000\t1\t64\t1
1616444455221286\t1500000\t1\t120\t2
"""


@pytest.fixture
def summary_text():
    return SAMPLE_SUMMARY_JSON


@pytest.fixture
def series_text():
    return SAMPLE_SERIES


@pytest.fixture
def write_logs():
    """Write monitor logs under a prefix, as the monitor would."""

    def _write(prefix, extensions=("summary",), summary=SAMPLE_SUMMARY_JSON):
        written = []
        for extension in extensions:
            path = Path(f"{prefix}.{extension}")
            if path.parent != Path("."):
                os.makedirs(path.parent, exist_ok=True)
            if extension == "summary":
                path.write_text(summary)
            elif extension == "series":
                path.write_text(SAMPLE_SERIES)
            else:
                path.write_text("/etc/hosts\n")
            written.append(path)
        return written

    return _write
