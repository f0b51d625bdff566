"""
This module contains the configuration settings for procwarden.
It defines default paths, polling intervals and logging options used by the
supervisor, the console and the tests. Values can be overridden through
environment variables or a `.env` file.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=False)


def _optional_float(name: str):
    value = os.getenv(name, "").strip()
    return float(value) if value else None


#* --- Core Paths ---
BASE_DIR = pathlib.Path(os.getenv("PROCWARDEN_HOME", pathlib.Path.cwd())).resolve()
RUN_DIR = BASE_DIR / "run"
LOGS_DIR = BASE_DIR / "logs"

#* --- Tracked Process ---
PID_FILE_PATH = pathlib.Path(os.getenv("PROCWARDEN_PID_FILE", RUN_DIR / "process.pid"))
PROCESS_NAME = os.getenv("PROCWARDEN_PROCESS_NAME", "process")
PROCESS_LOG_PATH = LOGS_DIR / "process.log"
OVERRIDES_JSON_PATH = pathlib.Path(os.getenv("PROCWARDEN_OVERRIDES", RUN_DIR / "overrides.json"))

#* --- Terminator Settings ---
KILL_POLL_INTERVAL = float(os.getenv("PROCWARDEN_POLL_INTERVAL", "0.005"))  # seconds
# None keeps polling until the process is confirmed gone.
KILL_TIMEOUT = _optional_float("PROCWARDEN_KILL_TIMEOUT")
PROBE_COMMAND_TIMEOUT = float(os.getenv("PROCWARDEN_PROBE_TIMEOUT", "10"))  # seconds

#* --- Platform Resource Bundles ---
PLATFORM_DIRECTORIES = {
    "windows": "win",
    "linux": "linux",
    "macosx": "mac",
}

#* --- Logging ---
LOG_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
LOG_FILE_PATH = os.getenv("PROCWARDEN_LOG_FILE", "")
VERBOSE_LOGGING = os.getenv("PROCWARDEN_VERBOSE", "False").lower() in ('true', '1', 't')

#* --- MODIFIABLE SETTINGS (Changeable through the overrides file) ---
MODIFIABLE_SETTINGS = {
    "KILL_POLL_INTERVAL", "KILL_TIMEOUT", "PROBE_COMMAND_TIMEOUT",
    "PROCESS_NAME", "PID_FILE_PATH", "PROCESS_LOG_PATH", "VERBOSE_LOGGING",
}
