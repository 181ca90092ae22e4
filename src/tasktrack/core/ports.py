# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used outside the storage layer.

Helpers and CLI commands depend on this Protocol instead of TaskStore itself,
so tests can hand them an in-memory fake.
"""

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    # Writes
    def create_task(self, task: Task) -> int: ...
    def update_task(self, task: Task) -> None: ...
    def delete_task(self, task_id: int) -> None: ...

    # Reads
    def get_task(self, task_id: int) -> Task | None: ...
    def get_all_tasks(self) -> list[Task]: ...
    def get_tasks_by_author(self, author_id: int) -> list[Task]: ...
    def get_tasks_by_label(self, label_id: int) -> list[Task]: ...
    def count_tasks(self) -> int: ...

    def close(self) -> None: ...
