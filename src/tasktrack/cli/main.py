# src/tasktrack/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the task store, runs the console REPL and
closes the store on the way out (also when something failed).
"""

from __future__ import annotations

import logging
import sys

from ..config import get_settings
from ..logging_setup import setup_logging
from ..tasks.task_errors import PersistenceError
from .bootstrap import create_initial_state
from .console import run_console_loop

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
    except PersistenceError as e:
        logger.error("Failed to connect to the database: %s", e)
        return 1

    try:
        run_console_loop(state)
    finally:
        try:
            state.store.close()
        except PersistenceError:
            logger.exception("Failed to close the database connection.")
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
