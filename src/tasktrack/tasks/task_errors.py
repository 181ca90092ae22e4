# src/tasktrack/tasks/task_errors.py

"""
Errors raised by the task store.

Every driver failure is surfaced as one of three PersistenceError subclasses.
The original exception (usually a SQLAlchemy one) stays attached as `__cause__`
and `.cause`.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator

from sqlalchemy import exc as sa_exc

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Base class for task store failures."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StoreConnectionError(PersistenceError):
    """The database is unreachable, rejected the credentials, or the store is closed."""


class ConstraintError(PersistenceError):
    """A write was rejected by a referential, NOT NULL or unique constraint."""


class QueryError(PersistenceError):
    """Malformed statement or another driver-level failure during execution."""


def classify(err: sa_exc.SQLAlchemyError) -> type[PersistenceError]:
    if isinstance(err, sa_exc.IntegrityError):
        return ConstraintError
    if isinstance(err, (sa_exc.OperationalError, sa_exc.InterfaceError)):
        # sqlite3 also reports missing tables and syntax errors as OperationalError
        if getattr(getattr(err, "orig", None), "sqlite_errorname", None) == "SQLITE_ERROR":
            return QueryError
        return StoreConnectionError
    if isinstance(err, sa_exc.DBAPIError) and err.connection_invalidated:
        return StoreConnectionError
    return QueryError


@contextlib.contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise driver errors from `operation` as PersistenceError subclasses."""
    try:
        yield
    except sa_exc.SQLAlchemyError as e:
        err_cls = classify(e)
        # DBAPIError keeps the driver's own message in .orig
        detail = getattr(e, "orig", None) or e
        logger.debug("%s failed: %s: %s", operation, err_cls.__name__, detail)
        raise err_cls(f"{operation} failed: {detail}", cause=e) from e
    except OverflowError as e:
        # sqlite3 refuses ints beyond 64 bits before SQLAlchemy can wrap the error
        logger.debug("%s failed: QueryError: %s", operation, e)
        raise QueryError(f"{operation} failed: {e}", cause=e) from e
