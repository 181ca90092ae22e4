# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from tasktrack.config import Settings
from tasktrack.core.state import AppState
from tasktrack.tasks.task_schema import create_schema, labels, tasks, tasks_labels, users
from tasktrack.tasks.task_store import TaskStore

from .fakes import SEED_TASKS


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'tasks.sqlite3'}"


@pytest.fixture()
def settings(db_url: str, tmp_path: Path) -> Settings:
    """
    Settings pointing at a throwaway SQLite file.

    Built directly rather than from the environment to keep tests deterministic.
    """
    return Settings(
        app_name="tasktrack-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        database_url=db_url,
        db_host="localhost",
        db_port=5432,
        db_user="postgres",
        db_password="",
        db_name="postgres",
        db_ssl=False,
        db_pool_size=5,
        db_max_overflow=10,
        db_pool_timeout=30,
        db_echo=False,
    )


@pytest.fixture()
def empty_store(db_url: str) -> Iterator[TaskStore]:
    """Store with the schema and two users (Alice=1, Bob=2), no tasks."""
    store = TaskStore(db_url)
    create_schema(store.engine)
    with store.engine.begin() as conn:
        conn.execute(users.insert(), [{"name": "Alice"}, {"name": "Bob"}])
        conn.execute(labels.insert(), [{"name": "Bug"}, {"name": "Feature"}])
    yield store
    store.close()


@pytest.fixture()
def store(empty_store: TaskStore) -> TaskStore:
    """
    Store seeded like a small real board:
    task 1 (Alice -> Bob) labelled Bug, task 2 (Bob -> Alice) labelled Feature.
    """
    with empty_store.engine.begin() as conn:
        conn.execute(tasks.insert(), SEED_TASKS)
        conn.execute(
            tasks_labels.insert(),
            [{"task_id": 1, "label_id": 1}, {"task_id": 2, "label_id": 2}],
        )
    return empty_store


@pytest.fixture()
def state(settings: Settings, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
