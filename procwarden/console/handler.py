import sys
import logging
from pathlib import Path
from typing import Dict, List, Optional

from procwarden.supervisor import ProcessSupervisor

log = logging.getLogger(__name__)


def toggle_verbose_logging(enabled: Optional[bool] = None) -> bool:
    """
    Switches the console handlers between INFO and DEBUG.

    :param enabled: Force a state instead of toggling.
    :return bool: True if verbose logging is now on.
    """
    root_logger = logging.getLogger()
    console_handlers = [
        h for h in root_logger.handlers
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
    ]
    if enabled is None:
        enabled = not any(h.level <= logging.DEBUG for h in console_handlers)

    level = logging.DEBUG if enabled else logging.INFO
    for handler in console_handlers:
        handler.setLevel(level)
    log.info(f"Verbose logging {'enabled' if enabled else 'disabled'}.")
    return enabled


def display_status(supervisor: ProcessSupervisor) -> Dict[str, object]:
    """Prints the state of the tracked process and returns the snapshot."""
    info = supervisor.describe()
    print(f"\n--- {info['name']} ---")
    print(f"  PID file : {supervisor.pid_file}")
    if info["pid"] is None:
        print("  Status   : Stopped (no PID file)")
    elif info["running"]:
        print(f"  Status   : Running (PID {info['pid']})")
        for key in ("process_name", "status", "started", "cmdline"):
            if key in info:
                print(f"  {key:<9}: {info[key]}")
    else:
        print(f"  Status   : Not running (stale PID {info['pid']})")
    print("")
    return info


def handle_start_command(supervisor: ProcessSupervisor, args: List[str]) -> Optional[int]:
    """Handles 'start <executable> [args...]'."""
    if not args:
        print("Usage: start <executable> [args...]")
        return None
    supervisor.executable = Path(args[0])
    try:
        return supervisor.start(*args[1:])
    except OSError as e:
        print(f"ERROR: Could not start {supervisor.name}: {e}")
        return None


def handle_stop_command(supervisor: ProcessSupervisor) -> bool:
    """Handles 'stop'."""
    if supervisor.read_pid() is None:
        log.info(f"No PID file at {supervisor.pid_file}; {supervisor.name} is not tracked.")
        return True
    stopped = supervisor.stop()
    if stopped:
        log.info(f"{supervisor.name} stopped.")
    else:
        log.warning(f"{supervisor.name} could not be confirmed stopped.")
    return stopped


def print_help() -> None:
    """Prints the list of console commands."""
    print("\nAvailable commands:")
    print("  start <executable> [args...] - Launch the process in the background and write its PID file.")
    print("  stop                         - Stop the tracked process and wait until it is gone.")
    print("  status                       - Show whether the tracked process is running.")
    print("  verbose                      - Toggle DEBUG output on the console.")
    print("  help                         - Show this help message.")
    print("  exit                         - Leave the console.")
    print("\nOptions: --pid-file PATH, --name NAME, --output PATH, --verbose\n")
