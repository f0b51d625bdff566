"""
Stopping the tracked process.

`Terminator.kill` reads the PID file, asks the platform to stop the process,
removes the PID file and then polls until the process is no longer seen. By
default that poll has no deadline: a process is never reported stopped while
it is still alive. Callers that cannot block indefinitely pass a `timeout` or a
`cancel_event`; a cancelled wait returns False.
"""
import time
import logging
import threading
from pathlib import Path
from typing import Optional, Union

from procwarden.config import effective_settings as config
from procwarden.supervisor.persistence import PidStore
from procwarden.supervisor.process_utils import ProcessControl, get_process_control

log = logging.getLogger(__name__)


class Terminator:
    """Stops the process recorded in a PID file and waits until it is gone."""

    def __init__(
        self,
        pid_store: Optional[PidStore] = None,
        control: Optional[ProcessControl] = None,
        poll_interval: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.log = logger or log
        self.pid_store = pid_store or PidStore(logger=self.log)
        self.control = control or get_process_control(logger=self.log)
        self.poll_interval = poll_interval if poll_interval is not None else config.KILL_POLL_INTERVAL

    def kill(
        self,
        pid_file: Union[str, Path],
        name: str,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bool:
        """
        Stops the process recorded in `pid_file`.

        :param pid_file: Location of the PID file.
        :param name: Human-readable process name for log messages.
        :param timeout: Optional limit in seconds for the wait. Defaults to
            `KILL_TIMEOUT`; None waits until the process is gone.
        :param cancel_event: Optional event that aborts the wait when set.
        :return bool: True once the process is confirmed stopped. False if the
            stop request was refused or the wait was cancelled.
        """
        pid = self.pid_store.read(pid_file)
        if pid is not None:
            pid = pid.strip()
        self.log.info(f"Stopping {name} process with pid {pid}")

        if not self.control.terminate(pid):
            self.log.warning(f"Failed to kill process with pid {pid}")
            return False

        # A failed delete is logged by the store and does not abort the stop.
        self.pid_store.delete(pid_file)

        if timeout is None:
            timeout = config.KILL_TIMEOUT
        return self.wait_for_exit(pid, timeout=timeout, cancel_event=cancel_event)

    def wait_for_exit(
        self,
        pid: Optional[str],
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bool:
        """
        Polls until `pid` is no longer running.

        :return bool: True when the process is gone, False if the wait was
            cancelled or ran past `timeout`.
        """
        deadline = time.monotonic() + timeout if timeout is not None else None

        while self.control.is_running(pid):
            if cancel_event is not None and cancel_event.is_set():
                self.log.warning(f"Stopped waiting for process with pid {pid}: wait cancelled.")
                return False
            if deadline is not None and time.monotonic() >= deadline:
                self.log.warning(f"Process with pid {pid} still running after {timeout} seconds.")
                return False
            self.log.debug(f"Process with pid {pid} hasn't stopped yet, waiting")
            if cancel_event is not None:
                cancel_event.wait(self.poll_interval)
            else:
                time.sleep(self.poll_interval)
        return True


def kill_process(
    pid_file: Union[str, Path],
    name: str,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> bool:
    """Stops the process recorded in `pid_file` using the running platform's defaults."""
    return Terminator().kill(pid_file, name, timeout=timeout, cancel_event=cancel_event)
