"""
Unit tests for monitor command construction, command wrapping and wrapper
scripts.
"""

import os
import stat

import pytest

from rmhook.models import ResourceSummary
from rmhook.system import BatchWrapper, locate_resource_monitor, wrap_command, write_monitor_command


@pytest.mark.unit
class TestWriteMonitorCommand:
    """Test cases for write_monitor_command."""

    def test_minimal_command(self):
        command = write_monitor_command("/opt/bin/resource_monitor", "r-7")

        assert command == "/opt/bin/resource_monitor -i 1 -o r-7 -- /bin/sh -c {}"

    def test_all_flags(self):
        command = write_monitor_command(
            "./cctools-monitor",
            "./logs/r-7",
            extra_options="-V 'category:c1'",
            debug=True,
            time_series=True,
            list_files=True,
            interval=5,
        )

        assert command.startswith("./cctools-monitor --debug --with-time-series --with-file-lists ")
        assert "-i 5 -o ./logs/r-7 -V 'category:c1'" in command
        assert command.endswith("-- /bin/sh -c {}")

    def test_limits(self):
        limits = ResourceSummary(cores=2, memory=1024.5)

        command = write_monitor_command("rm", "r-1", limits=limits)

        assert "-L 'cores: 2 cores'" in command
        assert "-L 'memory: 1024.5 MB'" in command

    def test_paths_are_quoted(self):
        command = write_monitor_command("/opt/my tools/resource_monitor", "my logs/r-1")

        assert command.startswith("'/opt/my tools/resource_monitor' ")
        assert "-o 'my logs/r-1'" in command


@pytest.mark.unit
class TestWrapCommand:
    """Test cases for wrap_command."""

    def test_quoted_placeholder(self):
        assert wrap_command("echo hi > out", "time {}") == "time 'echo hi > out'"

    def test_raw_placeholder(self):
        assert wrap_command("echo hi", "env -i []") == "env -i echo hi"

    def test_no_placeholder(self):
        assert wrap_command("echo hi", "nice") == "nice /bin/sh -c 'echo hi'"

    def test_no_wrapper(self):
        assert wrap_command("echo hi", None) == "echo hi"

    def test_wrappers_nest(self):
        inner = wrap_command("echo hi", "strace {}")
        outer = wrap_command(inner, "time {}")

        assert outer == "time 'strace '\"'\"'echo hi'\"'\"''"

    def test_monitor_command_wraps_task(self):
        monitor = write_monitor_command("/rm", "r-1")

        assert wrap_command("make all", monitor) == "/rm -i 1 -o r-1 -- /bin/sh -c 'make all'"


@pytest.mark.unit
class TestLocateResourceMonitor:
    """Test cases for locate_resource_monitor."""

    def test_explicit_path(self, fake_monitor):
        assert locate_resource_monitor(fake_monitor) == fake_monitor

    def test_explicit_path_missing(self, tmp_path):
        assert locate_resource_monitor(str(tmp_path / "missing")) is None

    def test_directory_is_not_a_monitor(self, tmp_path):
        assert locate_resource_monitor(str(tmp_path)) is None


@pytest.mark.unit
class TestBatchWrapper:
    """Test cases for BatchWrapper."""

    def test_write_script(self, tmp_path):
        wrapper = BatchWrapper(str(tmp_path / "resource_monitor"))
        wrapper.cmd("/rm -o r-1 -- /bin/sh -c 'echo hi'")

        name = wrapper.write()

        assert name is not None
        assert os.path.basename(name).startswith("resource_monitor_")
        with open(name) as f:
            assert f.read() == "#!/bin/sh\nset -e\n/rm -o r-1 -- /bin/sh -c 'echo hi'\n"
        assert os.stat(name).st_mode & stat.S_IXUSR

    def test_relative_prefix_keeps_dot(self, workdir):
        name = BatchWrapper("./resource_monitor").write()

        assert name.startswith("./resource_monitor_")
        assert (workdir / name[2:]).is_file()

    def test_unique_names(self, workdir):
        first = BatchWrapper("./resource_monitor").write()
        second = BatchWrapper("./resource_monitor").write()

        assert first != second

    def test_write_failure(self, tmp_path):
        wrapper = BatchWrapper(str(tmp_path / "missing" / "resource_monitor"))
        wrapper.cmd("true")

        assert wrapper.write() is None
