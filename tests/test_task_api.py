# tests/test_task_api.py

from __future__ import annotations

from tasktrack.tasks.task_api import close_task, reopen_task
from tasktrack.tasks.task_models import Task
from tasktrack.tasks.task_store import TaskStore

from .fakes import FakeTaskRepo


def test_close_task_sets_closed_timestamp() -> None:
    repo = FakeTaskRepo([Task(id=7, opened=100, author_id=1, assigned_id=1, title="t")])

    assert close_task(repo, 7, closed_at=200) is True

    assert repo.tasks[7].closed == 200
    assert repo.tasks[7].opened == 100
    assert not repo.tasks[7].is_open


def test_close_task_defaults_to_now() -> None:
    repo = FakeTaskRepo([Task(id=1, opened=100)])
    assert close_task(repo, 1)
    assert repo.tasks[1].closed > 100


def test_close_missing_task_returns_false() -> None:
    repo = FakeTaskRepo([])
    assert close_task(repo, 1, closed_at=5) is False
    assert repo.updates == []


def test_reopen_task() -> None:
    repo = FakeTaskRepo([Task(id=1, opened=100, closed=150), Task(id=2, opened=100)])

    assert reopen_task(repo, 1) is True
    assert repo.tasks[1].is_open

    # already open: nothing to write
    assert reopen_task(repo, 2) is True
    assert [t.id for t in repo.updates] == [1]

    assert reopen_task(repo, 3) is False


def test_close_and_reopen_against_store(store: TaskStore) -> None:
    assert close_task(store, 2, closed_at=1_800_000_000)
    closed = store.get_task(2)
    assert closed is not None
    assert closed.closed == 1_800_000_000
    assert closed.title == "Add search feature"

    assert reopen_task(store, 2)
    reopened = store.get_task(2)
    assert reopened is not None
    assert reopened.is_open
