import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from procwarden.supervisor.platform import PlatformKind, current_platform

PATH_VARIABLE = "PATH"
LIBRARY_PATH_VARIABLES = {
    PlatformKind.MACOSX: "DYLD_LIBRARY_PATH",
    PlatformKind.LINUX: "LD_LIBRARY_PATH",
}


def prefix_path_str(new_path: str, curr_path: Optional[str]) -> str:
    """
    Puts `new_path` in front of an existing search path.

    :param new_path: The entry to put first.
    :param curr_path: The current value, may be None or blank.
    :return str: `new_path` alone, or `new_path` joined to the trimmed current value.
    """
    if curr_path is not None and curr_path.strip():
        return new_path + os.pathsep + curr_path.strip()
    return new_path


def compose_environment(
    base_dir: Union[str, Path],
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[PlatformKind] = None,
) -> Dict[str, str]:
    """
    Builds the environment for a child process living in `base_dir`.

    PATH is prefixed with `base_dir` so sibling executables resolve first. On
    Mac OS X and Linux the dynamic library search path is prefixed too, so
    libraries shipped next to the executable are found. Windows resolves DLLs
    through PATH and gets no library variable.

    :param base_dir: Directory that contains the primary executable.
    :param environ: The environment snapshot to start from. Defaults to `os.environ`.
    :param platform: Platform to compose for. Defaults to the running platform.
    :return dict: A new environment mapping; `environ` itself is left untouched.
    """
    platform = platform or current_platform()
    env = dict(os.environ if environ is None else environ)
    base_dir = str(base_dir)

    env[PATH_VARIABLE] = prefix_path_str(base_dir, env.get(PATH_VARIABLE))

    library_variable = LIBRARY_PATH_VARIABLES.get(platform)
    if library_variable:
        env[library_variable] = prefix_path_str(base_dir, env.get(library_variable))

    return env
