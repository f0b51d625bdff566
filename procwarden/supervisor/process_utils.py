import os
import csv
import signal
import psutil
import logging
import subprocess
from typing import List, Optional

from procwarden.config import effective_settings as config
from procwarden.supervisor.platform import PlatformKind, current_platform

log = logging.getLogger(__name__)

# Largest value a signed 32-bit pid_t can hold.
PID_MAX = 2 ** 31 - 1


def _clean_pid(pid: Optional[str]) -> str:
    return str(pid).strip() if pid is not None else ""


def tasklist_contains_pid(output: str, pid: str) -> bool:
    """
    Scans `tasklist /FO CSV` output for a row describing `pid`.

    Only the PID column is compared, and only as a whole value, so PID 12
    matches neither a row for PID 123 nor a row whose session number is 12.
    """
    pid = _clean_pid(pid)
    for row in csv.reader(output.splitlines()):
        if len(row) > 1 and row[1].strip() == pid:
            return True
    return False


def _has_exited(pid: int) -> bool:
    """A zombie still answers signal 0 but has already exited."""
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True
    except psutil.Error:
        return False


#* --- Platform Capabilities ---
class ProcessControl:
    """
    Probes and stops processes by PID.

    Variants are picked once through `get_process_control`; callers never
    branch on the platform themselves.
    """

    platform: PlatformKind

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or log

    def is_running(self, pid: Optional[str]) -> bool:
        """
        Checks if the given PID currently identifies a running process.

        A blank PID is never running and is answered without touching the OS.
        Probe failures are logged and reported as not running.
        """
        pid = _clean_pid(pid)
        if not pid:
            return False
        try:
            return self._probe(pid)
        except (OSError, subprocess.SubprocessError) as e:
            self.log.error(f"Failed to probe process {pid}: {e}")
            return False

    def terminate(self, pid: Optional[str]) -> bool:
        """
        Requests termination of the given PID.

        Reports True once the request was issued, or when there is nothing to
        stop. Reports False only when the request was refused while the
        process is still alive.
        """
        pid = _clean_pid(pid)
        if not pid:
            self.log.debug("No pid given, nothing to terminate.")
            return True
        return self._terminate(pid)

    def _probe(self, pid: str) -> bool:
        raise NotImplementedError

    def _terminate(self, pid: str) -> bool:
        raise NotImplementedError


class PosixProcessControl(ProcessControl):
    """Linux and Mac OS X: signal 0 to probe, SIGTERM to stop."""

    platform = PlatformKind.LINUX

    def __init__(self, platform: PlatformKind = PlatformKind.LINUX, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger=logger)
        self.platform = platform

    def _parse(self, pid: str) -> Optional[int]:
        # 0 and negative values address process groups, never a single process.
        # Values past PID_MAX do not fit in a pid_t.
        try:
            value = int(pid)
        except ValueError:
            self.log.warning(f"'{pid}' is not a valid pid.")
            return None
        if value <= 0 or value > PID_MAX:
            self.log.warning(f"'{pid}' is not a valid pid.")
            return None
        return value

    def _probe(self, pid: str) -> bool:
        value = self._parse(pid)
        if value is None:
            return False
        try:
            # Signal 0 is delivered only if the process exists and we may signal it.
            os.kill(value, 0)
        except (ProcessLookupError, PermissionError):
            return False
        return not _has_exited(value)

    def _terminate(self, pid: str) -> bool:
        value = self._parse(pid)
        if value is None:
            return True
        try:
            os.kill(value, signal.SIGTERM)
        except ProcessLookupError:
            self.log.debug(f"Process {pid} was already gone.")
        except PermissionError as e:
            self.log.warning(f"Not permitted to signal process {pid}: {e}")
            return False
        return True


class WindowsProcessControl(ProcessControl):
    """Windows: `tasklist` filtered by PID to probe, `taskkill /F` to stop."""

    platform = PlatformKind.WINDOWS

    def __init__(self, logger: Optional[logging.Logger] = None, probe_timeout: Optional[float] = None) -> None:
        super().__init__(logger=logger)
        self.probe_timeout = probe_timeout if probe_timeout is not None else config.PROBE_COMMAND_TIMEOUT

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=self.probe_timeout,
            check=False,
        )

    def _probe(self, pid: str) -> bool:
        result = self._run(["tasklist", "/FI", f"PID eq {pid}", "/FO", "CSV", "/NH"])
        return tasklist_contains_pid(result.stdout or "", pid)

    def _terminate(self, pid: str) -> bool:
        """
        :raises OSError: If `taskkill` itself cannot be started.
        """
        try:
            result = self._run(["taskkill", "/F", "/PID", pid])
        except subprocess.TimeoutExpired as e:
            self.log.warning(f"taskkill for pid {pid} timed out: {e}")
            return not self.is_running(pid)

        if result.returncode == 0 or not self.is_running(pid):
            return True
        self.log.warning(f"taskkill for pid {pid} exited with {result.returncode}: {(result.stderr or '').strip()}")
        return False


def get_process_control(
    platform: Optional[PlatformKind] = None,
    logger: Optional[logging.Logger] = None,
    probe_timeout: Optional[float] = None,
) -> ProcessControl:
    """
    Selects the ProcessControl variant for a platform.

    :param platform: Platform to select for. Defaults to the running platform,
        which raises UnsupportedPlatformError on an unknown OS.
    :return ProcessControl: The platform's implementation.
    """
    platform = platform or current_platform()
    if platform is PlatformKind.WINDOWS:
        return WindowsProcessControl(logger=logger, probe_timeout=probe_timeout)
    return PosixProcessControl(platform=platform, logger=logger)


def is_process_running(pid: Optional[str]) -> bool:
    """Checks a PID with the running platform's ProcessControl."""
    return get_process_control().is_running(pid)
