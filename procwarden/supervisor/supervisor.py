import time
import psutil
import logging
import subprocess
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from procwarden.config import effective_settings as config
from procwarden.supervisor.persistence import PidStore
from procwarden.supervisor.shutdown import Terminator
from procwarden.supervisor.platform import PlatformKind, current_platform
from procwarden.supervisor.process_utils import ProcessControl, get_process_control
from procwarden.supervisor.launch import ProcessDescriptor, create_process_descriptor, get_popen_creation_flags

log = logging.getLogger(__name__)


class ProcessSupervisor:
    """
    Ties the launch, PID file and stop helpers together for one tracked process.

    The supervisor does not restart anything and does not watch the child; it
    only knows the PID file.
    """

    def __init__(
        self,
        executable: Optional[Union[str, Path]] = None,
        pid_file: Optional[Union[str, Path]] = None,
        name: Optional[str] = None,
        output_path: Optional[Union[str, Path]] = None,
        platform: Optional[PlatformKind] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.log = logger or log
        self.platform = platform or current_platform()
        self.executable = Path(executable) if executable else None
        self.pid_file = Path(pid_file or config.PID_FILE_PATH)
        self.name = name or config.PROCESS_NAME
        self.output_path = Path(output_path) if output_path else None

        self.pid_store = PidStore(logger=self.log)
        self.control: ProcessControl = get_process_control(self.platform, logger=self.log)
        self.terminator = Terminator(pid_store=self.pid_store, control=self.control, logger=self.log)
        self.process: Optional[subprocess.Popen] = None

    #* --- Status ---
    def read_pid(self) -> Optional[str]:
        """Returns the tracked PID as text, or None if nothing is tracked."""
        pid = self.pid_store.read(self.pid_file)
        return pid.strip() if pid is not None else None

    def is_running(self) -> bool:
        return self.control.is_running(self.read_pid())

    def describe(self) -> Dict[str, Any]:
        """
        Returns a status snapshot of the tracked process.

        :return dict: Always holds 'name', 'pid' and 'running'. Details from
            psutil ('process_name', 'status', 'started', 'cmdline') are added
            when the process can be inspected.
        """
        pid = self.read_pid()
        info: Dict[str, Any] = {"name": self.name, "pid": pid, "running": self.control.is_running(pid)}
        if not info["running"]:
            return info
        try:
            proc = psutil.Process(int(pid))
            with proc.oneshot():
                info["process_name"] = proc.name()
                info["status"] = proc.status()
                info["started"] = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(proc.create_time()))
                info["cmdline"] = " ".join(proc.cmdline())
        except (ValueError, psutil.Error) as e:
            self.log.debug(f"Could not inspect process {pid}: {e}")
        return info

    #* --- Lifecycle ---
    def prepare(self, *args: Any) -> ProcessDescriptor:
        """
        Builds the descriptor for the executable followed by `args`.

        :raises ValueError: If the supervisor was created without an executable.
        """
        if self.executable is None:
            raise ValueError(f"No executable configured for {self.name}.")
        return create_process_descriptor(
            self.executable, str(self.executable), *args, platform=self.platform, logger=self.log
        )

    def start(self, *args: Any) -> Optional[int]:
        """
        Launches the executable in the background and records its PID.

        :param args: Arguments passed to the executable.
        :return: The new PID, or None if a tracked process is already running.
        :raises OSError: If the process cannot be spawned or the PID file cannot be written.
        """
        if self.is_running():
            self.log.error(f"{self.name} appears to be running (PID {self.read_pid()}). Stop it first.")
            return None

        descriptor = self.prepare(*args)
        self.log.info(f"Starting process: {self.name}...")

        output = subprocess.DEVNULL
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            output = self.output_path.open("ab")

        try:
            proc = subprocess.Popen(
                stdin=subprocess.DEVNULL,
                stdout=output,
                stderr=subprocess.STDOUT,
                cwd=str(self.executable.parent),
                **descriptor.popen_kwargs(),
                **get_popen_creation_flags(self.platform),
            )
        except OSError as e:
            self.log.critical(f"Failed to start process '{self.name}': {e}", exc_info=True)
            raise
        finally:
            if output is not subprocess.DEVNULL:
                output.close()

        self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        self.process = proc
        self.pid_store.write(proc.pid, self.pid_file)
        self.log.info(f"{self.name} started successfully with PID: {proc.pid}")
        return proc.pid

    def stop(self, timeout: Optional[float] = None, cancel_event: Optional[threading.Event] = None) -> bool:
        """Stops the tracked process and waits until it is gone. See `Terminator.kill`."""
        stopped = self.terminator.kill(self.pid_file, self.name, timeout=timeout, cancel_event=cancel_event)
        if stopped and self.process is not None:
            # Reap our own child so it does not linger as a zombie.
            self.process.poll()
            self.process = None
        return stopped
