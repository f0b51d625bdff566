import logging
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PidStore:
    """
    Mechanical read/write/delete of a PID file.

    The file holds the decimal PID and nothing else; a missing file means
    there is no tracked process. Deciding when to write or delete is up to
    the caller.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or log

    def write(self, pid: int, path: PathLike) -> None:
        """
        Atomically writes the PID to the PID file, replacing any previous content.

        :param pid: The process id to persist.
        :param path: Location of the PID file.
        :raises OSError: If the file cannot be written.
        """
        pid_path = Path(path)
        self.log.info(f"Creating pid file: {pid_path}")
        temp_pid_path = pid_path.with_name(pid_path.name + ".tmp")
        try:
            temp_pid_path.write_text(str(int(pid)))
            temp_pid_path.replace(pid_path)
        except OSError as e:
            self.log.error(f"Failed to write PID file {pid_path}: {e}")
            raise
        finally:
            temp_pid_path.unlink(missing_ok=True)

    def read(self, path: PathLike) -> Optional[str]:
        """
        Reads the PID file.

        :param path: Location of the PID file.
        :return: The raw file content, or None if the file is absent or unreadable.
        """
        pid_path = Path(path)
        if not pid_path.exists():
            return None
        try:
            return pid_path.read_text()
        except (OSError, UnicodeDecodeError) as e:
            self.log.error(f"Could not read pid file {pid_path}: {e}")
            return None

    def delete(self, path: PathLike) -> bool:
        """
        Removes the PID file.

        :param path: Location of the PID file.
        :return bool: True if the file was removed, False otherwise.
        """
        pid_path = Path(path)
        try:
            pid_path.unlink()
        except OSError as e:
            self.log.warning(f"Could not delete pid file {pid_path}: {e}")
            return False
        return True
