import sys
import logging
from enum import Enum
from functools import lru_cache
from typing import Optional

from procwarden.config import effective_settings as config

log = logging.getLogger(__name__)

UNSUPPORTED_PLATFORM_MESSAGE = (
    "Running on unsupported OS! Only Windows, Linux and Mac OS X are currently supported"
)


class UnsupportedPlatformError(RuntimeError):
    """Raised when the host OS is none of the supported platforms."""


class PlatformKind(Enum):
    """The operating-system families procwarden knows how to drive."""

    WINDOWS = "windows"
    LINUX = "linux"
    MACOSX = "macosx"

    @property
    def is_posix(self) -> bool:
        return self is not PlatformKind.WINDOWS


def identify_platform(os_name: Optional[str] = None) -> PlatformKind:
    """
    Classifies an OS name (a `sys.platform` value) into a PlatformKind.

    :param os_name: The OS name to classify. Defaults to `sys.platform`.
    :return PlatformKind: The matching platform.
    :raises UnsupportedPlatformError: If the OS is not Windows, Linux or Mac OS X.
    """
    name = (os_name if os_name is not None else sys.platform).lower()

    if name in ("win32", "cygwin"):
        return PlatformKind.WINDOWS
    if name.startswith("linux"):
        return PlatformKind.LINUX
    if name == "darwin":
        return PlatformKind.MACOSX

    log.error(f"{UNSUPPORTED_PLATFORM_MESSAGE} (detected '{name}')")
    raise UnsupportedPlatformError(UNSUPPORTED_PLATFORM_MESSAGE)


@lru_cache(maxsize=None)
def current_platform() -> PlatformKind:
    """Returns the PlatformKind of the running interpreter."""
    return identify_platform()


def get_platform_directory(platform: Optional[PlatformKind] = None) -> str:
    """
    Returns the name of the directory holding platform-specific resource bundles.

    :param platform: The platform to look up. Defaults to the running platform.
    :return str: 'win', 'linux' or 'mac'.
    """
    platform = platform or current_platform()
    return config.PLATFORM_DIRECTORIES[platform.value]
