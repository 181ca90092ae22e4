# src/tasktrack/tasks/task_api.py

from __future__ import annotations

import logging
import time
from dataclasses import replace

from ..core.ports import TaskRepo

logger = logging.getLogger(__name__)


def close_task(repo: TaskRepo, task_id: int, *, closed_at: int | None = None) -> bool:
    """
    Convenience helper: mark a task as closed.

    `closed_at` defaults to the caller's clock (unix seconds). Returns False if
    the task does not exist.
    """
    task = repo.get_task(task_id)
    if task is None:
        return False

    if closed_at is None:
        closed_at = int(time.time())

    repo.update_task(replace(task, closed=int(closed_at)))
    logger.info("Closed task id=%s at=%s", task_id, closed_at)
    return True


def reopen_task(repo: TaskRepo, task_id: int) -> bool:
    task = repo.get_task(task_id)
    if task is None:
        return False
    if task.is_open:
        return True

    repo.update_task(replace(task, closed=0))
    logger.info("Reopened task id=%s", task_id)
    return True
