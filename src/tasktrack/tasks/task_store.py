# src/tasktrack/tasks/task_store.py

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import URL, Engine, Row, make_url

from .task_errors import StoreConnectionError, translate_errors
from .task_models import ConnectionDescriptor, Task
from .task_schema import enable_sqlite_foreign_keys, epoch_now

logger = logging.getLogger(__name__)

_TASK_COLUMNS = "id, opened, closed, author_id, assigned_id, title, content"

_SUPPORTED_DIALECTS = ("postgresql", "sqlite")


class TaskStore:
    """
    SQL task store.

    Every public method is a single parameterized statement executed in its
    own transaction. The schema (users, labels, tasks, tasks_labels) must
    already exist; see task_schema.create_schema.

    Thread-safety:
    - the SQLAlchemy engine pools connections, one store can be shared
    - correctness of concurrent update/delete on the same row is left to the database
    """

    def __init__(
        self,
        target: ConnectionDescriptor | URL | str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: float = 30.0,
        pool_recycle: int = 1800,
        echo: bool = False,
    ) -> None:
        url = target.to_url() if isinstance(target, ConnectionDescriptor) else target
        self._engine = self._create_engine(
            url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            echo=echo,
        )
        self._closed = False

        dialect = self._engine.dialect.name
        if dialect not in _SUPPORTED_DIALECTS:
            self._engine.dispose()
            raise StoreConnectionError(f"Unsupported database dialect: {dialect}")
        # rendered once; the INSERT takes "now" from the database clock
        self._epoch_now = str(epoch_now().compile(dialect=self._engine.dialect))

        try:
            self._ping()
        except Exception:
            self._engine.dispose()
            raise

        logger.info(
            "TaskStore ready db=%s",
            self._engine.url.render_as_string(hide_password=True),
        )

    @staticmethod
    def _create_engine(url: URL | str, **opts: Any) -> Engine:
        echo = opts.pop("echo", False)
        try:
            url = make_url(url)
            engine_args: dict[str, Any] = {}
            if url.get_backend_name() == "sqlite":
                engine_args["connect_args"] = {"check_same_thread": False}
            else:
                # Pool settings only make sense for server databases.
                engine_args.update(opts)
                engine_args["pool_pre_ping"] = True
            engine = create_engine(url, echo=echo, **engine_args)
        except sa_exc.ArgumentError as e:
            raise StoreConnectionError(f"Invalid database target: {e}", cause=e) from e

        enable_sqlite_foreign_keys(engine)
        return engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release pooled connections. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._engine.dispose()
        logger.info("TaskStore closed")

    def __enter__(self) -> TaskStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    def _check_open(self) -> None:
        if self._closed:
            raise StoreConnectionError("TaskStore is closed")

    def _ping(self) -> None:
        with translate_errors("connect"), self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def _fetch_tasks(self, operation: str, sql: str, params: dict[str, Any] | None = None) -> list[Task]:
        self._check_open()
        with translate_errors(operation), self._engine.begin() as conn:
            rows = conn.execute(text(sql), params or {}).all()
        return [self._row_to_task(r) for r in rows]

    def _execute(self, operation: str, sql: str, params: dict[str, Any]) -> int:
        self._check_open()
        with translate_errors(operation), self._engine.begin() as conn:
            result = conn.execute(text(sql), params)
            return result.rowcount

    @staticmethod
    def _row_to_task(row: Row) -> Task:
        m = row._mapping
        return Task(
            id=int(m["id"]),
            opened=int(m["opened"] or 0),
            closed=int(m["closed"] or 0),
            author_id=int(m["author_id"] or 0),
            assigned_id=int(m["assigned_id"] or 0),
            title=str(m["title"] or ""),
            content=str(m["content"] or ""),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        self._check_open()
        with translate_errors("count_tasks"), self._engine.connect() as conn:
            return int(conn.execute(text("SELECT COUNT(*) FROM tasks")).scalar_one())

    def create_task(self, task: Task) -> int:
        """
        Insert `task` and return its new id.

        Only author_id, assigned_id, title and content are taken from the input;
        opened comes from the database clock and closed starts at 0.
        """
        self._check_open()
        with translate_errors("create_task"), self._engine.begin() as conn:
            task_id = conn.execute(
                text(
                    f"""
                    INSERT INTO tasks (opened, closed, author_id, assigned_id, title, content)
                    VALUES ({self._epoch_now}, 0, :author_id, :assigned_id, :title, :content)
                    RETURNING id
                    """
                ),
                {
                    "author_id": task.author_id,
                    "assigned_id": task.assigned_id,
                    "title": task.title,
                    "content": task.content,
                },
            ).scalar_one()

        logger.debug(
            "Task created id=%s author_id=%s assigned_id=%s",
            task_id,
            task.author_id,
            task.assigned_id,
        )
        return int(task_id)

    def get_task(self, task_id: int) -> Task | None:
        tasks = self._fetch_tasks(
            "get_task",
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = :task_id",
            {"task_id": int(task_id)},
        )
        return tasks[0] if tasks else None

    def get_all_tasks(self) -> list[Task]:
        """All tasks, in whatever order the database returns them."""
        return self._fetch_tasks("get_all_tasks", f"SELECT {_TASK_COLUMNS} FROM tasks")

    def get_tasks_by_author(self, author_id: int) -> list[Task]:
        return self._fetch_tasks(
            "get_tasks_by_author",
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE author_id = :author_id",
            {"author_id": int(author_id)},
        )

    def get_tasks_by_label(self, label_id: int) -> list[Task]:
        return self._fetch_tasks(
            "get_tasks_by_label",
            """
            SELECT t.id, t.opened, t.closed, t.author_id, t.assigned_id, t.title, t.content
            FROM tasks t
            JOIN tasks_labels tl ON t.id = tl.task_id
            WHERE tl.label_id = :label_id
            """,
            {"label_id": int(label_id)},
        )

    def update_task(self, task: Task) -> None:
        """
        Overwrite closed, author_id, assigned_id, title and content of task.id.

        An id that matches no row is a no-op, not an error.
        """
        n = self._execute(
            "update_task",
            """
            UPDATE tasks
            SET closed = :closed,
                author_id = :author_id,
                assigned_id = :assigned_id,
                title = :title,
                content = :content
            WHERE id = :task_id
            """,
            {
                "closed": int(task.closed),
                "author_id": task.author_id,
                "assigned_id": task.assigned_id,
                "title": task.title,
                "content": task.content,
                "task_id": int(task.id),
            },
        )
        logger.debug("Task update id=%s rows=%s", task.id, n)

    def delete_task(self, task_id: int) -> None:
        """Delete task_id if it exists; deleting a missing id is a no-op."""
        n = self._execute("delete_task", "DELETE FROM tasks WHERE id = :task_id", {"task_id": int(task_id)})
        logger.debug("Task delete id=%s rows=%s", task_id, n)
