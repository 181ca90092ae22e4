# src/tasktrack/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasktrack.log"

# Minimum console level per logger prefix; first match wins.
_CONSOLE_FLOORS: tuple[tuple[str, int], ...] = (
    ("tasktrack.", logging.NOTSET),
    # TASKTRACK_DB_ECHO logs every statement and its parameters at INFO
    ("sqlalchemy.engine", logging.WARNING),
    # checkout/checkin/pre-ping chatter, useful only in the file
    ("sqlalchemy.pool", logging.WARNING),
    ("sqlalchemy", logging.WARNING),
    ("py.warnings", logging.ERROR),
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console REPL readable.

    Our own loggers pass through. SQL echo and pool events stay in the log
    file unless they are warnings. Anything else needs ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix, floor in _CONSOLE_FLOORS:
            if record.name.startswith(prefix):
                return record.levelno >= floor
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasktrack",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send filtered records to stderr and everything to `<log_dir>/tasktrack.log`.

    Replaces any handlers already on the root logger, so call it once at
    startup. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(fmt)
    root.addHandler(to_file)

    logging.captureWarnings(True)
    return log_file
