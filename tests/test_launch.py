"""Tests for process descriptor preparation."""

import os
import sys
import logging
import dataclasses

import pytest

from procwarden.supervisor import launch
from procwarden.supervisor.launch import (
    ProcessDescriptor,
    create_process_descriptor,
    ensure_file_is_executable,
    get_executable_path,
)
from procwarden.supervisor.platform import PlatformKind

SEP = os.pathsep

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX file modes")


@pytest.fixture
def executable(tmp_path):
    path = tmp_path / "bin" / "geth"
    path.parent.mkdir()
    path.write_text("#!/bin/sh\n")
    return path


def test_variadic_and_sequence_commands_are_equivalent(executable, quiet):
    env = {"PATH": "/usr/bin"}
    variadic = create_process_descriptor(executable, str(executable), "--datadir", "data",
                                         environ=env, platform=PlatformKind.LINUX, logger=quiet)
    listed = create_process_descriptor(executable, [str(executable), "--datadir", "data"],
                                       environ=env, platform=PlatformKind.LINUX, logger=quiet)
    assert variadic == listed
    assert variadic.command == (str(executable), "--datadir", "data")


def test_base_dir_is_parent_of_executable_hint(executable, quiet):
    descriptor = create_process_descriptor(executable, str(executable),
                                           environ={"PATH": "/usr/bin"}, platform=PlatformKind.LINUX, logger=quiet)
    assert descriptor.environment["PATH"] == str(executable.parent) + SEP + "/usr/bin"
    assert descriptor.environment["LD_LIBRARY_PATH"] == str(executable.parent)


def test_base_dir_hint_may_be_the_directory(executable, quiet):
    descriptor = create_process_descriptor(executable.parent, "geth",
                                           environ={}, platform=PlatformKind.MACOSX, logger=quiet)
    assert descriptor.environment["PATH"] == str(executable.parent)
    assert descriptor.environment["DYLD_LIBRARY_PATH"] == str(executable.parent)


def test_bare_executable_name_is_found_on_path(executable, quiet, monkeypatch):
    monkeypatch.setattr(launch.shutil, "which", lambda name: str(executable) if name == "geth" else None)
    descriptor = create_process_descriptor("geth", "geth", "--datadir", "data",
                                           environ={"PATH": "/usr/bin"}, platform=PlatformKind.LINUX, logger=quiet)
    assert descriptor.environment["PATH"] == str(executable.parent) + SEP + "/usr/bin"
    assert descriptor.environment["LD_LIBRARY_PATH"] == str(executable.parent)


def test_unknown_bare_name_never_yields_relative_dir(tmp_path, quiet, monkeypatch):
    monkeypatch.setattr(launch.shutil, "which", lambda name: None)
    monkeypatch.chdir(tmp_path)
    descriptor = create_process_descriptor("missing-tool", "missing-tool",
                                           environ={}, platform=PlatformKind.LINUX, logger=quiet)
    assert os.path.isabs(descriptor.environment["PATH"])
    assert descriptor.environment["PATH"] != "."


def test_arguments_are_stringified(executable, quiet):
    descriptor = create_process_descriptor(executable, "geth", "--port", 30303,
                                           environ={}, platform=PlatformKind.LINUX, logger=quiet)
    assert descriptor.command == ("geth", "--port", "30303")


def test_empty_command_is_rejected(executable, quiet):
    with pytest.raises(ValueError):
        create_process_descriptor(executable, environ={}, platform=PlatformKind.LINUX, logger=quiet)
    with pytest.raises(ValueError):
        create_process_descriptor(executable, [], environ={}, platform=PlatformKind.LINUX, logger=quiet)


def test_descriptor_is_immutable():
    descriptor = ProcessDescriptor(command=["geth"], environment={"PATH": "/bin"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        descriptor.command = ("other",)
    with pytest.raises(TypeError):
        descriptor.environment["PATH"] = "/tmp"


def test_descriptor_is_hashable():
    first = ProcessDescriptor(command=["geth"], environment={"PATH": "/bin"})
    second = ProcessDescriptor(command=("geth",), environment={"PATH": "/bin"})
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1


def test_descriptor_copies_its_environment():
    env = {"PATH": "/bin"}
    descriptor = ProcessDescriptor(command=["geth"], environment=env)
    env["PATH"] = "/changed"
    assert descriptor.environment["PATH"] == "/bin"


def test_popen_kwargs():
    descriptor = ProcessDescriptor(command=("geth", "console"), environment={"PATH": "/bin"})
    kwargs = descriptor.popen_kwargs()
    assert kwargs == {"args": ["geth", "console"], "env": {"PATH": "/bin"}}
    kwargs["env"]["PATH"] = "/tmp"
    assert descriptor.environment["PATH"] == "/bin"


def test_command_line_traced_only_at_debug(executable, caplog):
    logger = logging.getLogger("procwarden.tests.launch")
    logger.setLevel(logging.INFO)
    with caplog.at_level(logging.INFO, logger="procwarden.tests.launch"):
        create_process_descriptor(executable, "geth", "--verbose", environ={},
                                  platform=PlatformKind.LINUX, logger=logger)
    assert "geth --verbose" not in caplog.text

    with caplog.at_level(logging.DEBUG, logger="procwarden.tests.launch"):
        create_process_descriptor(executable, "geth", "--verbose", environ={},
                                  platform=PlatformKind.LINUX, logger=logger)
    assert "geth --verbose" in caplog.text


def test_executable_path_gets_exe_suffix_on_windows(tmp_path):
    base = tmp_path / "geth"
    assert get_executable_path(base, PlatformKind.WINDOWS).name == "geth.exe"
    assert get_executable_path(base, PlatformKind.LINUX) == base


def test_ensure_missing_file_is_not_executable(tmp_path, quiet):
    assert ensure_file_is_executable(tmp_path / "missing", logger=quiet) is False


@posix_only
def test_ensure_file_is_executable_sets_mode(executable, quiet):
    executable.chmod(0o644)
    assert not os.access(executable, os.X_OK)
    assert ensure_file_is_executable(executable, logger=quiet) is True
    assert os.access(executable, os.X_OK)


@posix_only
def test_ensure_file_is_executable_keeps_executable_file(executable, quiet):
    executable.chmod(0o755)
    assert ensure_file_is_executable(executable, logger=quiet) is True
