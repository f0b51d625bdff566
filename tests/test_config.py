"""Tests for merged settings and JSON overrides."""

import json
from pathlib import Path

from procwarden.config import MergedSettings


def write_overrides(tmp_path, payload):
    path = tmp_path / "overrides.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return path


def test_defaults_without_overrides_file(tmp_path):
    settings = MergedSettings(overrides_path=tmp_path / "missing.json")
    assert settings.KILL_POLL_INTERVAL > 0
    assert settings.PLATFORM_DIRECTORIES["macosx"] == "mac"


def test_modifiable_overrides_are_applied_and_coerced(tmp_path):
    path = write_overrides(tmp_path, {
        "KILL_POLL_INTERVAL": "0.5",
        "KILL_TIMEOUT": 3,
        "PID_FILE_PATH": "/var/run/geth.pid",
        "VERBOSE_LOGGING": "yes",
    })
    settings = MergedSettings(overrides_path=path)
    assert settings.KILL_POLL_INTERVAL == 0.5
    assert settings.KILL_TIMEOUT == 3.0
    assert settings.PID_FILE_PATH == Path("/var/run/geth.pid")
    assert settings.VERBOSE_LOGGING is True


def test_non_modifiable_and_unknown_keys_are_ignored(tmp_path):
    default = MergedSettings(overrides_path=tmp_path / "missing.json")
    path = write_overrides(tmp_path, {"LOG_FORMAT": "%(message)s", "NOT_A_SETTING": 1})
    settings = MergedSettings(overrides_path=path)
    assert settings.LOG_FORMAT == default.LOG_FORMAT
    assert not hasattr(settings, "NOT_A_SETTING")


def test_malformed_overrides_file_is_ignored(tmp_path):
    default = MergedSettings(overrides_path=tmp_path / "missing.json")
    settings = MergedSettings(overrides_path=write_overrides(tmp_path, "{not json"))
    assert settings.KILL_POLL_INTERVAL == default.KILL_POLL_INTERVAL


def test_non_object_overrides_file_is_ignored(tmp_path):
    default = MergedSettings(overrides_path=tmp_path / "missing.json")
    settings = MergedSettings(overrides_path=write_overrides(tmp_path, "[1, 2, 3]"))
    assert settings.KILL_POLL_INTERVAL == default.KILL_POLL_INTERVAL


def test_bad_value_keeps_default(tmp_path):
    default = MergedSettings(overrides_path=tmp_path / "missing.json")
    settings = MergedSettings(overrides_path=write_overrides(tmp_path, {"KILL_POLL_INTERVAL": "fast"}))
    assert settings.KILL_POLL_INTERVAL == default.KILL_POLL_INTERVAL


def test_dictionary_access(tmp_path):
    settings = MergedSettings(overrides_path=tmp_path / "missing.json")
    assert settings.get("PROCESS_NAME") == settings.PROCESS_NAME
    assert settings.get("MISSING", "fallback") == "fallback"
    assert "KILL_TIMEOUT" in settings.get_all_settings()
