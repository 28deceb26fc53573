# src/scheduler_db/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the front-ends.

Commands and connectors depend on this Protocol instead of the concrete TaskStore.
This keeps storage swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Persistence port for scheduler tasks (see tasks/task_store.py)."""

    @property
    def limit(self) -> int: ...

    def count_tasks(self) -> int: ...
    def insert_task(self, task: Task) -> int: ...
    def list_tasks(self) -> list[Task]: ...
    def search_tasks(self, search: str) -> list[Task]: ...
    def search_tasks_by_date(self, date: str) -> list[Task]: ...
    def read_task(self, task_id: int | str) -> Task: ...
    def update_task(self, task: Task) -> Task: ...
    def delete_task(self, task_id: int | str) -> None: ...
    def close(self) -> None: ...
