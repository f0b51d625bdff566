import sys
import logging
from typing import Dict, List, Optional, Tuple

from procwarden import console
from procwarden.log import setup_logging
from procwarden.supervisor import ProcessSupervisor
from procwarden.config import effective_settings as config

log = logging.getLogger("console")

VALUE_OPTIONS = ("--pid-file", "--name", "--output")


def parse_options(argv: List[str]) -> Tuple[Dict[str, object], List[str]]:
    """
    Pulls the console options out of the argument list.

    Options are only recognised before the command's own arguments begin, so
    `start app --verbose` still passes `--verbose` to the app.

    :param argv: The raw arguments, without the program name.
    :return tuple: (options, remaining arguments).
    """
    options: Dict[str, object] = {"verbose": config.VERBOSE_LOGGING}
    remaining: List[str] = []
    args = list(argv)
    while args:
        arg = args.pop(0)
        if remaining and remaining[0].lower() == "start" and len(remaining) > 1:
            remaining.append(arg)
        elif arg == "--verbose":
            options["verbose"] = True
        elif arg in VALUE_OPTIONS:
            if not args:
                raise ValueError(f"Option {arg} requires a value.")
            options[arg[2:].replace("-", "_")] = args.pop(0)
        else:
            remaining.append(arg)
    return options, remaining


def main(argv: Optional[List[str]] = None) -> int:
    """The main entry point for the console application."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        options, args = parse_options(argv)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    setup_logging(logging.DEBUG if options["verbose"] else logging.INFO)
    supervisor = ProcessSupervisor(
        pid_file=options.get("pid_file"),
        name=options.get("name"),
        output_path=options.get("output", config.PROCESS_LOG_PATH),
    )

    # Non-interactive mode for one-off commands
    if args:
        command, command_args = args[0].lower(), args[1:]
        console.execute_command(command, command_args, supervisor)
        return 0

    # Interactive mode
    print("--- procwarden console ---")
    print("Type 'help' for a list of commands.")
    status = "Running" if supervisor.is_running() else "Stopped"
    print(f"{supervisor.name} is currently {status}.")

    while True:
        try:
            command_line = input("> ").strip().split()
            if not command_line:
                continue
            command, command_args = command_line[0].lower(), command_line[1:]
            if console.execute_command(command, command_args, supervisor):
                break
        except (KeyboardInterrupt, EOFError):
            log.warning("\nExiting console.")
            break
    return 0


if __name__ == "__main__":
    sys.exit(main())
