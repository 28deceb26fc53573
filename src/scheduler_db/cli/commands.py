# src/scheduler_db/cli/commands.py

from __future__ import annotations

import functools
import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_errors import InvalidTaskError, NotFoundError, StorageError
from ..tasks.task_models import Task, parse_task_id

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

FIELD_SEP = "|"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
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

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def store_errors(handler: CommandHandler) -> CommandHandler:
    """Turn task store failures into a reply instead of crashing the console."""

    @functools.wraps(handler)
    def wrapper(state: AppState, args: list[str]) -> str:
        try:
            return handler(state, args)
        except NotFoundError as exc:
            if exc.task_id is None:
                return "Task not found."
            return f"Task {exc.task_id} not found."
        except InvalidTaskError as exc:
            return f"Invalid task: {exc.message}."
        except StorageError:
            logger.exception("Task command failed: %s", handler.__name__)
            return "Storage error, see the log for details."

    return wrapper


def format_task(task: Task) -> str:
    line = f"#{task.id} [{task.date or 'no date'}] {task.title}"
    if task.comment:
        line += f" ({task.comment})"
    if task.repeat:
        line += f" repeat={task.repeat}"
    return line


def _format_tasks(header: str, tasks: list[Task]) -> str:
    if not tasks:
        return f"{header}: nothing found."
    lines = [f"{header}:"]
    lines.extend(f"  {format_task(t)}" for t in tasks)
    return "\n".join(lines)


def parse_task_fields(text: str, *, task_id: int = 0) -> Task:
    """
    Parse "title | date | comment | repeat" (trailing parts optional).

    Raises InvalidTaskError for too many parts; field limits are checked by the store.
    """
    parts = [p.strip() for p in text.split(FIELD_SEP)]
    if len(parts) > 4:
        raise InvalidTaskError("expected at most: title | date | comment | repeat")
    parts += [""] * (4 - len(parts))
    title, date, comment, repeat = parts
    return Task(id=task_id, date=date, title=title, comment=comment, repeat=repeat)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


@store_errors
def cmd_status(state: AppState, args: list[str]) -> str:
    db_path = getattr(state.settings, "db_path", "?")
    return (
        "Status:\n"
        f"  Database: {db_path}\n"
        f"  Tasks stored: {state.task_store.count_tasks()}\n"
        f"  Row limit: {state.task_store.limit}"
    )


@store_errors
def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title                          -> task without a date
    /add title | 20240131               -> dated task
    /add title | 20240131 | note | d 7  -> with comment and repeat rule
    """
    if not args:
        return "Usage: /add title [| YYYYMMDD [| comment [| repeat]]]"
    task = parse_task_fields(" ".join(args))
    task_id = state.task_store.insert_task(task)
    return f"Added task #{task_id}."


@store_errors
def cmd_list(state: AppState, args: list[str]) -> str:
    return _format_tasks("Tasks", state.task_store.list_tasks())


@store_errors
def cmd_search(state: AppState, args: list[str]) -> str:
    text = " ".join(args)
    return _format_tasks(f"Search '{text}'", state.task_store.search_tasks(text))


@store_errors
def cmd_date(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /date YYYYMMDD"
    date = args[0]
    return _format_tasks(f"Tasks on {date}", state.task_store.search_tasks_by_date(date))


@store_errors
def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show id"
    return format_task(state.task_store.read_task(args[0]))


@store_errors
def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit id title | date | comment | repeat

    Every field is overwritten; omitted trailing parts become empty.
    """
    if len(args) < 2:
        return "Usage: /edit id title [| YYYYMMDD [| comment [| repeat]]]"
    task_id = parse_task_id(args[0])
    if task_id is None:
        return f"Task {args[0]} not found."
    task = state.task_store.update_task(parse_task_fields(" ".join(args[1:]), task_id=task_id))
    return f"Updated: {format_task(task)}"


@store_errors
def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del id"
    state.task_store.delete_task(args[0])
    return f"Deleted task #{args[0]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database path and task count.")
registry.register("add", cmd_add, help_text="Add a task: /add title | YYYYMMDD | comment | repeat.")
registry.register("list", cmd_list, help_text="List upcoming tasks (ordered by date).", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search titles and comments: /search text.")
registry.register("date", cmd_date, help_text="Tasks on one date: /date YYYYMMDD.")
registry.register("show", cmd_show, help_text="Show one task: /show id.")
registry.register(
    "edit", cmd_edit, help_text="Overwrite a task: /edit id title | YYYYMMDD | comment | repeat."
)
registry.register("del", cmd_delete, help_text="Delete a task: /del id.", aliases=["rm"])
