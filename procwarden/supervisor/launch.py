import os
import stat
import shutil
import logging
import subprocess
from pathlib import Path
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from procwarden.supervisor.environment import compose_environment
from procwarden.supervisor.platform import PlatformKind, current_platform

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessDescriptor:
    """A ready-to-start command line and the environment it must run with."""

    command: Tuple[str, ...]
    environment: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "command", tuple(str(arg) for arg in self.command))
        object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def popen_kwargs(self) -> Dict[str, Any]:
        """Returns the `args` and `env` keyword arguments for subprocess.Popen."""
        return {"args": list(self.command), "env": dict(self.environment)}


def get_executable_path(base_path: Path, platform: Optional[PlatformKind] = None) -> Path:
    """
    Returns the platform-specific full path for an executable.

    It appends ".exe" on Windows systems.

    :param base_path: The base path of the executable (e.g., '.../bin/geth').
    :param platform: Platform to resolve for. Defaults to the running platform.
    :return pathlib.Path: The full, platform-aware Path object for the executable.
    """
    platform = platform or current_platform()
    return base_path.with_suffix(".exe") if platform is PlatformKind.WINDOWS else base_path


def get_popen_creation_flags(platform: Optional[PlatformKind] = None) -> Dict[str, Any]:
    """
    Returns platform-specific keyword arguments for subprocess.Popen.

    On Windows, this uses flags to run the process detached and without a
    console window. On other platforms the child is put in its own session so
    it outlives the caller's terminal.

    :return dict: A dictionary of keyword arguments for Popen.
    """
    platform = platform or current_platform()
    if platform is PlatformKind.WINDOWS:
        return {
            "creationflags": subprocess.DETACHED_PROCESS | subprocess.CREATE_NO_WINDOW
        }
    return {"start_new_session": True}


def _resolve_base_dir(base_path: Union[str, Path]) -> Path:
    path = Path(base_path)
    if not path.is_dir() and path.parent == Path("."):
        # A bare name like "sleep" is looked up on PATH.
        found = shutil.which(str(path))
        if found:
            path = Path(found)
    path = path.absolute()
    if path.is_dir():
        return path
    # The hint is the primary executable itself.
    return path.parent


def _normalize_command(command: Sequence[Any]) -> Tuple[str, ...]:
    if len(command) == 1 and isinstance(command[0], (list, tuple)):
        command = command[0]
    return tuple(str(arg) for arg in command)


def create_process_descriptor(
    base_path: Union[str, Path],
    *command: Any,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[PlatformKind] = None,
    logger: Optional[logging.Logger] = None,
) -> ProcessDescriptor:
    """
    Prepares a process descriptor without starting anything.

    The command may be given as separate arguments or as one pre-built list.
    Starting the process and consuming its output is left to the caller.

    :param base_path: The primary executable, or the directory that contains it.
    :param command: The executable and its arguments.
    :param environ: The environment snapshot to start from. Defaults to `os.environ`.
    :param platform: Platform to compose for. Defaults to the running platform.
    :param logger: Logger for the command trace. Defaults to this module's logger.
    :return ProcessDescriptor: The command and its composed environment.
    :raises ValueError: If no command is given.
    """
    logger = logger or log
    args = _normalize_command(command)
    if not args:
        raise ValueError("Cannot prepare a process without a command.")

    base_dir = _resolve_base_dir(base_path)
    env = compose_environment(base_dir, environ=environ, platform=platform)
    descriptor = ProcessDescriptor(command=args, environment=env)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(descriptor.command_line)

    return descriptor


def ensure_file_is_executable(filename: Union[str, Path], logger: Optional[logging.Logger] = None) -> bool:
    """
    Ensures that the given file, if it exists, is executable.

    :param filename: Path of the file to check.
    :param logger: Logger to report to. Defaults to this module's logger.
    :return bool: True if the file exists and is executable afterwards, False otherwise.
    """
    logger = logger or log
    path = Path(filename)
    exists = path.is_file()
    logger.info(f"testing {path} exists: {exists}")
    if not exists:
        return False
    if os.access(path, os.X_OK):
        return True

    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        logger.warning(f"Could not make {path} executable: {e}")
        return False
    return os.access(path, os.X_OK)
