# src/tasktrack/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Either a full database URL or separate host/user/password/name fields.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import ConnectionDescriptor

ENV_PREFIX = "TASKTRACK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Database ----
    database_url: str
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_ssl: bool

    # ---- Pool ----
    db_pool_size: int
    db_max_overflow: int
    db_pool_timeout: int
    db_echo: bool

    def database_target(self) -> ConnectionDescriptor | str:
        """The explicit URL wins; otherwise build a descriptor from the parts."""
        if self.database_url:
            return self.database_url
        return ConnectionDescriptor(
            host=self.db_host,
            port=self.db_port,
            user=self.db_user,
            password=self.db_password,
            dbname=self.db_name,
            ssl=self.db_ssl,
        )

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "tasktrack") or "tasktrack",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=_env_path(_k("DATA_DIR"), Path(".local/tasktrack")),
            database_url=_env(_k("DATABASE_URL"), "").strip(),
            db_host=_env(_k("DB_HOST"), "localhost").strip(),
            db_port=_env_int(_k("DB_PORT"), 5432),
            db_user=_env(_k("DB_USER"), "postgres").strip(),
            db_password=_env(_k("DB_PASSWORD"), ""),
            db_name=_env(_k("DB_NAME"), "postgres").strip(),
            db_ssl=_env_bool(_k("DB_SSL"), False),
            db_pool_size=_env_int(_k("DB_POOL_SIZE"), 5),
            db_max_overflow=_env_int(_k("DB_MAX_OVERFLOW"), 10),
            db_pool_timeout=_env_int(_k("DB_POOL_TIMEOUT"), 30),
            db_echo=_env_bool(_k("DB_ECHO"), False),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
