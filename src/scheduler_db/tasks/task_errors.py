# src/scheduler_db/tasks/task_errors.py

"""
Errors raised by the task store.

Two kinds reach callers:
- StorageError: anything that went wrong inside SQLite (open/exec/query/decode),
  plus InvalidTaskError for records rejected before the write.
- NotFoundError: the id did not match a row (read/update/delete).
"""

from __future__ import annotations


class TaskStoreError(Exception):
    """Base class for task store failures."""

    code: str = "task_store_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class StorageError(TaskStoreError):
    code = "storage_error"


class InvalidTaskError(StorageError):
    """A task violates the table constraints (title/date/length limits)."""

    code = "constraint_violation"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(TaskStoreError):
    code = "task_not_found"

    def __init__(self, message: str = "task not found", *, task_id: int | str | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id
