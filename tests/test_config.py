# tests/test_config.py

from __future__ import annotations

import pytest

from tasklist.config import Settings
from tasklist.persistence import MAX_LOGS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATA_FILE", "LOG_FILE", "RELEASE", "MAX_LOGS"):
        monkeypatch.delenv(f"TASKLIST_{name}", raising=False)


def test_defaults() -> None:
    settings = Settings.from_env([])

    assert settings == Settings(
        data_file="tasks.json", log_file="debug.log", release=False, max_logs=MAX_LOGS,
    )


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKLIST_DATA_FILE", "/tmp/my-tasks.json")
    monkeypatch.setenv("TASKLIST_LOG_FILE", "/tmp/tasklist.log")
    monkeypatch.setenv("TASKLIST_RELEASE", "yes")
    monkeypatch.setenv("TASKLIST_MAX_LOGS", "25")

    settings = Settings.from_env([])

    assert settings.data_file == "/tmp/my-tasks.json"
    assert settings.log_file == "/tmp/tasklist.log"
    assert settings.release is True
    assert settings.max_logs == 25


def test_flags_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKLIST_DATA_FILE", "env.json")

    settings = Settings.from_env(["--release", "--data-file", "cli.json", "--unknown"])

    assert settings.data_file == "cli.json"
    assert settings.release is True


@pytest.mark.parametrize("raw", ["lots", "0", "-3", ""])
def test_bad_max_logs_falls_back(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("TASKLIST_MAX_LOGS", raw)
    assert Settings.from_env([]).max_logs == MAX_LOGS
