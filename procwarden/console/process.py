import logging
from typing import List

from procwarden.supervisor import ProcessSupervisor
from procwarden.console.handler import (
    display_status, handle_start_command, handle_stop_command, print_help, toggle_verbose_logging,
)

log = logging.getLogger(__name__)


def execute_command(command: str, args: List[str], supervisor: ProcessSupervisor) -> bool:
    """
    Executes a single command from the user.

    :param command: The main command string (e.g., 'start', 'stop').
    :param args: A list of arguments for the command.
    :param supervisor: The supervisor of the tracked process.
    :return bool: True if the console should exit, False otherwise.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = {
        "start": lambda: handle_start_command(supervisor, args),
        "stop": lambda: handle_stop_command(supervisor),
        "status": lambda: display_status(supervisor),
        "verbose": toggle_verbose_logging,
        "help": print_help,
    }

    if command == "exit":
        return True

    if command == "restart":
        if handle_stop_command(supervisor):
            handle_start_command(supervisor, args)
    elif command in command_map:
        command_map[command]()
    else:
        log.info(f"Unknown command: '{command}'. Type 'help' for a list of commands.")

    return False
