"""Tests for the single-process supervisor."""

import os
import sys
from pathlib import Path

import pytest

from procwarden.supervisor.supervisor import ProcessSupervisor

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX process semantics")

SLEEP_ARGS = ("-c", "import time; time.sleep(60)")


@pytest.fixture
def supervisor(tmp_path, quiet):
    sup = ProcessSupervisor(
        executable=sys.executable,
        pid_file=tmp_path / "run" / "python.pid",
        name="sleeper",
        output_path=tmp_path / "logs" / "sleeper.log",
        logger=quiet,
    )
    yield sup
    if sup.process is not None and sup.process.poll() is None:
        sup.process.kill()
        sup.process.wait(timeout=10)


def test_start_writes_pid_file(supervisor):
    pid = supervisor.start(*SLEEP_ARGS)
    assert pid is not None
    assert supervisor.pid_file.read_text() == str(pid)
    assert supervisor.is_running() is True


def test_start_refuses_while_running(supervisor):
    pid = supervisor.start(*SLEEP_ARGS)
    assert supervisor.start(*SLEEP_ARGS) is None
    assert supervisor.read_pid() == str(pid)


def test_stop_kills_and_removes_pid_file(supervisor):
    supervisor.start(*SLEEP_ARGS)
    assert supervisor.stop(timeout=30) is True
    assert not supervisor.pid_file.exists()
    assert supervisor.is_running() is False
    assert supervisor.process is None


def test_describe_running_process(supervisor):
    pid = supervisor.start(*SLEEP_ARGS)
    info = supervisor.describe()
    assert info["name"] == "sleeper"
    assert info["pid"] == str(pid)
    assert info["running"] is True
    assert "time.sleep" in info["cmdline"]


def test_describe_without_pid_file(supervisor):
    assert supervisor.describe() == {"name": "sleeper", "pid": None, "running": False}


def test_describe_stale_pid_file(supervisor):
    supervisor.pid_file.parent.mkdir(parents=True)
    supervisor.pid_file.write_text(str(2 ** 31 - 1))
    info = supervisor.describe()
    assert info["running"] is False
    assert "process_name" not in info


def test_prepared_environment_puts_executable_dir_first(supervisor):
    descriptor = supervisor.prepare(*SLEEP_ARGS)
    assert descriptor.command[0] == sys.executable
    assert descriptor.environment["PATH"].split(os.pathsep)[0] == str(Path(sys.executable).parent)


def test_prepare_without_executable_raises(tmp_path, quiet):
    sup = ProcessSupervisor(pid_file=tmp_path / "x.pid", logger=quiet)
    with pytest.raises(ValueError):
        sup.prepare()


def test_child_output_goes_to_log_file(tmp_path, quiet):
    sup = ProcessSupervisor(
        executable=sys.executable,
        pid_file=tmp_path / "echo.pid",
        output_path=tmp_path / "echo.log",
        logger=quiet,
    )
    sup.start("-c", "print('hello from child')")
    sup.process.wait(timeout=30)
    assert "hello from child" in (tmp_path / "echo.log").read_text()
