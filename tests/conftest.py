"""Shared test fixtures: silent logger, PID file paths and a disposable child process."""

import sys
import subprocess

import pytest

from procwarden.log import silent_logger


SLEEP_SCRIPT = "import time; time.sleep(60)"


@pytest.fixture
def quiet():
    return silent_logger("procwarden.tests")


@pytest.fixture
def pid_path(tmp_path):
    return tmp_path / "child.pid"


@pytest.fixture
def sleeper():
    """A child process that idles until the test stops it."""
    proc = subprocess.Popen(
        [sys.executable, "-c", SLEEP_SCRIPT],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        yield proc
    finally:
        if proc.poll() is None:
            proc.kill()
        proc.wait(timeout=10)
