# src/tasktrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings are kept on the state so commands can report them.
    settings: Settings
    store: TaskRepo
