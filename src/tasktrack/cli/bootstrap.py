# src/tasktrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- builds the one TaskStore the process uses,
- wires it into AppState.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> TaskStore:
    target = settings.database_target()
    logger.debug("Opening task store target=%r", target if not isinstance(target, str) else "<url>")
    return TaskStore(
        target,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        echo=settings.db_echo,
    )


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    return AppState(settings=settings, store=create_store(settings))
