# src/scheduler_db/tasks/task_models.py

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass

from .task_errors import InvalidTaskError

DATE_LEN = 8  # YYYYMMDD
TITLE_MAX_LEN = 64
COMMENT_MAX_LEN = 255
REPEAT_MAX_LEN = 128

# SQLite INTEGER is a signed 64-bit value.
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1

_ID_RE = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)


def id_in_range(task_id: int) -> bool:
    return ID_MIN <= task_id <= ID_MAX


def parse_task_id(raw: int | str) -> int | None:
    """
    Ids arrive as ints or as strings from outer layers.

    Only plain ASCII integers that fit a SQLite INTEGER are accepted; anything
    else ("1_0", non-ASCII digits, overflow) cannot name a row and gives None.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if id_in_range(raw) else None
    text = str(raw)
    if not _ID_RE.fullmatch(text):
        return None
    value = int(text)
    return value if id_in_range(value) else None


@dataclass(slots=True)
class Task:
    """
    One row of the `scheduler` table.

    Notes:
    - id == 0 means "not stored yet"; the store assigns ids on insert.
    - NULL columns are read back as "" so callers never see None.
    - repeat is opaque recurrence text; nothing here interprets it.
    """

    id: int = 0
    date: str = ""
    title: str = ""
    comment: str = ""
    repeat: str = ""

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Task:
        return cls(
            id=int(row["id"]),
            date=str(row["date"] or ""),
            title=str(row["title"] or ""),
            comment=str(row["comment"] or ""),
            repeat=str(row["repeat"] or ""),
        )

    def validate(self) -> None:
        if not self.title:
            raise InvalidTaskError("title is required", field="title")
        if len(self.title) > TITLE_MAX_LEN:
            raise InvalidTaskError(f"title is longer than {TITLE_MAX_LEN} characters", field="title")
        if self.date and len(self.date) != DATE_LEN:
            raise InvalidTaskError(
                f"date must be empty or exactly {DATE_LEN} characters", field="date"
            )
        if len(self.comment) > COMMENT_MAX_LEN:
            raise InvalidTaskError(
                f"comment is longer than {COMMENT_MAX_LEN} characters", field="comment"
            )
        if len(self.repeat) > REPEAT_MAX_LEN:
            raise InvalidTaskError(
                f"repeat is longer than {REPEAT_MAX_LEN} characters", field="repeat"
            )
