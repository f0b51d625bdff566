"""
The Supervisor package.
Launches, tracks and stops a single external process.

Leaves first: `platform` identifies the OS, `environment` composes the child's
environment, `launch` prepares the process descriptor, `persistence` keeps the
PID file, `process_utils` probes and signals PIDs, `shutdown` stops the tracked
process and waits for it, and `supervisor` wires them together.
"""
from .platform import PlatformKind, UnsupportedPlatformError, current_platform, get_platform_directory, identify_platform
from .environment import compose_environment, prefix_path_str
from .launch import ProcessDescriptor, create_process_descriptor, ensure_file_is_executable
from .persistence import PidStore
from .process_utils import ProcessControl, PosixProcessControl, WindowsProcessControl, get_process_control, is_process_running
from .shutdown import Terminator, kill_process
from .supervisor import ProcessSupervisor

__all__ = [
    "PlatformKind", "UnsupportedPlatformError", "current_platform", "get_platform_directory", "identify_platform",
    "compose_environment", "prefix_path_str",
    "ProcessDescriptor", "create_process_descriptor", "ensure_file_is_executable",
    "PidStore",
    "ProcessControl", "PosixProcessControl", "WindowsProcessControl", "get_process_control", "is_process_running",
    "Terminator", "kill_process",
    "ProcessSupervisor",
]
