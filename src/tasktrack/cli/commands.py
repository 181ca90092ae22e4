# src/tasktrack/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_api import close_task, reopen_task
from ..tasks.task_errors import PersistenceError
from ..tasks.task_models import Task
from ..tasks.task_schema import create_schema

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store failures are turned into a one-line reply; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except PersistenceError as e:
            logger.warning("/%s failed: %s", name, e)
            return f"Database error ({type(e).__name__}): {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_ts(ts: int) -> str:
    # closed is caller-supplied and may be far outside what datetime can represent
    try:
        return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return str(ts)


def format_task(task: Task) -> str:
    state = "open" if task.is_open else f"closed {_fmt_ts(task.closed)}"
    return (
        f"#{task.id} [{state}] {task.title} "
        f"(author={task.author_id}, assigned={task.assigned_id}, opened {_fmt_ts(task.opened)})"
    )


def _format_list(title: str, tasks: list[Task]) -> str:
    if not tasks:
        return f"{title}: none."
    lines = [f"{title}:"]
    lines.extend(f"  {format_task(t)}" for t in tasks)
    return "\n".join(lines)


def _parse_int(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def _split_title_content(words: list[str]) -> tuple[str, str]:
    """'Fix login | The form breaks' -> ('Fix login', 'The form breaks')."""
    title, _, content = " ".join(words).partition("|")
    return title.strip(), content.strip()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    target = state.settings.database_target()
    where = "custom URL" if isinstance(target, str) else f"{target.host}:{target.port}/{target.dbname}"
    return (
        "Status:\n"
        f"  App: {state.settings.app_name}\n"
        f"  Database: {where}\n"
        f"  Tasks: {state.store.count_tasks()}"
    )


def cmd_initdb(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    engine = getattr(state.store, "engine", None)
    if engine is None:
        return "This store does not expose an engine; cannot create schema."
    if emit:
        emit("Creating missing tables...")
    create_schema(engine)
    return "Schema is ready."


def cmd_tasks(state: AppState, args: list[str]) -> str:
    return _format_list("All tasks", state.store.get_all_tasks())


def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_int(args[0]) if args else None
    if task_id is None:
        return "Usage: /show <task_id>"
    task = state.store.get_task(task_id)
    if task is None:
        return f"Task #{task_id} not found."
    return f"{format_task(task)}\n{task.content}"


def cmd_author(state: AppState, args: list[str]) -> str:
    author_id = _parse_int(args[0]) if args else None
    if author_id is None:
        return "Usage: /author <user_id>"
    return _format_list(f"Tasks by author {author_id}", state.store.get_tasks_by_author(author_id))


def cmd_label(state: AppState, args: list[str]) -> str:
    label_id = _parse_int(args[0]) if args else None
    if label_id is None:
        return "Usage: /label <label_id>"
    return _format_list(f"Tasks with label {label_id}", state.store.get_tasks_by_label(label_id))


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <author_id> <assigned_id> <title> | <content>
    """
    usage = "Usage: /add <author_id> <assigned_id> <title> | <content>"
    if len(args) < 3:
        return usage
    author_id, assigned_id = _parse_int(args[0]), _parse_int(args[1])
    if author_id is None or assigned_id is None:
        return usage
    title, content = _split_title_content(args[2:])
    if not title:
        return usage

    task_id = state.store.create_task(
        Task(author_id=author_id, assigned_id=assigned_id, title=title, content=content)
    )
    return f"Task created with id {task_id}."


def cmd_update(state: AppState, args: list[str]) -> str:
    """
    /update <task_id> <closed> <author_id> <assigned_id> <title> | <content>

    Overwrites every mutable field. Updating a missing id changes nothing.
    """
    usage = "Usage: /update <task_id> <closed> <author_id> <assigned_id> <title> | <content>"
    if len(args) < 5:
        return usage
    nums = [_parse_int(a) for a in args[:4]]
    if any(n is None for n in nums):
        return usage
    task_id, closed, author_id, assigned_id = cast(list[int], nums)
    title, content = _split_title_content(args[4:])

    state.store.update_task(
        Task(
            id=task_id,
            closed=closed,
            author_id=author_id,
            assigned_id=assigned_id,
            title=title,
            content=content,
        )
    )
    return f"Task #{task_id} updated."


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_int(args[0]) if args else None
    if task_id is None:
        return "Usage: /done <task_id>"
    if not close_task(state.store, task_id):
        return f"Task #{task_id} not found."
    return f"Task #{task_id} closed."


def cmd_reopen(state: AppState, args: list[str]) -> str:
    task_id = _parse_int(args[0]) if args else None
    if task_id is None:
        return "Usage: /reopen <task_id>"
    if not reopen_task(state.store, task_id):
        return f"Task #{task_id} not found."
    return f"Task #{task_id} is open."


def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = _parse_int(args[0]) if args else None
    if task_id is None:
        return "Usage: /delete <task_id>"
    state.store.delete_task(task_id)
    return f"Task #{task_id} deleted."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database target and task count.")
registry.register("initdb", cmd_initdb, help_text="Create missing tables (users, labels, tasks, tasks_labels).")
registry.register("tasks", cmd_tasks, help_text="List all tasks.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("author", cmd_author, help_text="Tasks written by a user: /author <user_id>.")
registry.register("label", cmd_label, help_text="Tasks carrying a label: /label <label_id>.")
registry.register("add", cmd_add, help_text="Create a task: /add <author> <assigned> <title> | <content>.")
registry.register(
    "update",
    cmd_update,
    help_text="Overwrite a task: /update <id> <closed> <author> <assigned> <title> | <content>.",
)
registry.register("done", cmd_done, help_text="Close a task now: /done <id>.")
registry.register("reopen", cmd_reopen, help_text="Reopen a closed task: /reopen <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
