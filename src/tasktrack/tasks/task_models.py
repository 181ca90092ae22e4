# src/tasktrack/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import URL


@dataclass(slots=True)
class Task:
    """
    A single work item as stored in the `tasks` table.

    `id` and `opened` are owned by the store: they are ignored on create
    and never written by update.
    """

    id: int = 0
    opened: int = 0  # unix seconds, database clock
    closed: int = 0  # unix seconds, 0 = still open

    author_id: int = 0
    assigned_id: int = 0

    title: str = ""
    content: str = ""

    @property
    def is_open(self) -> bool:
        return self.closed == 0


@dataclass(frozen=True, slots=True)
class ConnectionDescriptor:
    """Where the task database lives and how to reach it."""

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = ""
    dbname: str = "postgres"
    ssl: bool = False
    driver: str = "postgresql+psycopg2"

    def to_url(self) -> URL:
        return URL.create(
            self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=self.port,
            database=self.dbname or None,
            query={"sslmode": "require" if self.ssl else "disable"},
        )

    def __repr__(self) -> str:
        # keep the password out of logs
        return (
            f"ConnectionDescriptor(host={self.host!r}, port={self.port}, user={self.user!r}, "
            f"dbname={self.dbname!r}, ssl={self.ssl})"
        )
