from pathlib import Path

import pytest

from care_schedule.config import DEFAULT_DATA_DIR, Settings

ENV_VARS = (
    "CARE_SCHEDULE_DATA_DIR", "CARE_SCHEDULE_BACKEND", "CARE_SCHEDULE_DB_PATH",
    "CARE_SCHEDULE_HISTORY_LIMIT", "CARE_SCHEDULE_START_TIME", "CARE_SCHEDULE_LOG_LEVEL",
    "CARE_SCHEDULE_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings.from_env()
    assert s.data_dir == DEFAULT_DATA_DIR
    assert s.backend == "json"
    assert s.history_limit == 50
    assert s.start_time == "07:00"
    assert s.log_level == "INFO"
    assert s.sqlite_path == DEFAULT_DATA_DIR / "schedule.sqlite3"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CARE_SCHEDULE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CARE_SCHEDULE_BACKEND", "SQLite")
    monkeypatch.setenv("CARE_SCHEDULE_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("CARE_SCHEDULE_HISTORY_LIMIT", "20.0")
    monkeypatch.setenv("CARE_SCHEDULE_LOG_LEVEL", "debug")
    monkeypatch.setenv("CARE_SCHEDULE_DEBUG", "yes")

    s = Settings.from_env()
    assert s.data_dir == Path(tmp_path)
    assert s.backend == "sqlite"
    assert s.sqlite_path == tmp_path / "x.db"
    assert s.history_limit == 20
    assert s.log_level == "DEBUG"
    assert s.debug


def test_invalid_values(monkeypatch):
    monkeypatch.setenv("CARE_SCHEDULE_HISTORY_LIMIT", "lots")
    assert Settings.from_env().history_limit == 50

    monkeypatch.setenv("CARE_SCHEDULE_BACKEND", "postgres")
    with pytest.raises(RuntimeError):
        Settings.from_env()
