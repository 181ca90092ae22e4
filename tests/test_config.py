# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasktrack.config import Settings
from tasktrack.tasks.task_models import ConnectionDescriptor

_VARS = (
    "APP_NAME",
    "LOG_LEVEL",
    "DATA_DIR",
    "DATABASE_URL",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_SSL",
    "DB_POOL_SIZE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for v in _VARS:
        monkeypatch.delenv(f"TASKTRACK_{v}", raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "tasktrack"
    assert s.data_dir == Path(".local/tasktrack")
    assert s.db_port == 5432
    assert s.db_ssl is False

    target = s.database_target()
    assert target == ConnectionDescriptor()


def test_descriptor_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKTRACK_DB_HOST", "db.internal")
    monkeypatch.setenv("TASKTRACK_DB_PORT", "6543")
    monkeypatch.setenv("TASKTRACK_DB_USER", "tasks")
    monkeypatch.setenv("TASKTRACK_DB_PASSWORD", "s3cret")
    monkeypatch.setenv("TASKTRACK_DB_NAME", "tracker")
    monkeypatch.setenv("TASKTRACK_DB_SSL", "yes")

    target = Settings.from_env().database_target()

    assert isinstance(target, ConnectionDescriptor)
    url = target.to_url()
    assert url.drivername == "postgresql+psycopg2"
    assert (url.host, url.port, url.username, url.password, url.database) == (
        "db.internal",
        6543,
        "tasks",
        "s3cret",
        "tracker",
    )
    assert url.query["sslmode"] == "require"
    assert "s3cret" not in repr(target)


def test_database_url_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKTRACK_DATABASE_URL", " sqlite:///tasks.db ")
    monkeypatch.setenv("TASKTRACK_DB_HOST", "ignored")
    assert Settings.from_env().database_target() == "sqlite:///tasks.db"


def test_bad_int_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKTRACK_DB_PORT", "not-a-port")
    monkeypatch.setenv("TASKTRACK_DB_POOL_SIZE", "")
    s = Settings.from_env()
    assert s.db_port == 5432
    assert s.db_pool_size == 5


def test_ssl_disabled_descriptor() -> None:
    url = ConnectionDescriptor(ssl=False).to_url()
    assert url.query["sslmode"] == "disable"
