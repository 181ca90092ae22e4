# src/tasktrack/tasks/task_schema.py

"""
Table definitions for the task database.

The store itself only issues plain SQL against these tables; the metadata here
exists so the schema can be created (or dropped) from Python on any backend
SQLAlchemy supports.
"""

from __future__ import annotations

import logging

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    Table,
    Text,
    event,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement

from .task_errors import translate_errors

logger = logging.getLogger(__name__)


class epoch_now(FunctionElement):
    """Current unix time in whole seconds, taken from the database clock."""

    type = BigInteger()
    name = "epoch_now"
    inherit_cache = True


@compiles(epoch_now, "postgresql")
def _epoch_now_postgresql(element, compiler, **kw) -> str:
    return "CAST(EXTRACT(EPOCH FROM NOW()) AS BIGINT)"


@compiles(epoch_now, "sqlite")
def _epoch_now_sqlite(element, compiler, **kw) -> str:
    return "CAST(strftime('%s', 'now') AS INTEGER)"


metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", Text, nullable=False),
)

labels = Table(
    "labels",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", Text, nullable=False),
)

tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("opened", BigInteger, nullable=False, server_default=epoch_now()),
    Column("closed", BigInteger, nullable=False, server_default=text("0")),
    Column("author_id", Integer, ForeignKey("users.id")),
    Column("assigned_id", Integer, ForeignKey("users.id")),
    Column("title", Text),
    Column("content", Text),
)

tasks_labels = Table(
    "tasks_labels",
    metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE")),
    Column("label_id", Integer, ForeignKey("labels.id")),
)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores REFERENCES unless each connection opts in."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _record) -> None:
        cur = dbapi_conn.cursor()
        try:
            cur.execute("PRAGMA foreign_keys=ON")
        finally:
            cur.close()


def create_schema(engine: Engine) -> None:
    """Create any missing tables (existing ones are left untouched)."""
    with translate_errors("create_schema"):
        metadata.create_all(engine)
    logger.info("Task schema ensured on %s", engine.url.render_as_string(hide_password=True))


def drop_schema(engine: Engine) -> None:
    with translate_errors("drop_schema"):
        metadata.drop_all(engine)
    logger.info("Task schema dropped on %s", engine.url.render_as_string(hide_password=True))
