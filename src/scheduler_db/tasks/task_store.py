# src/scheduler_db/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from .task_errors import InvalidTaskError, NotFoundError, StorageError
from .task_models import Task, parse_task_id

logger = logging.getLogger(__name__)

DEFAULT_DB_FILE = "scheduler.db"
DEFAULT_LIMIT = 20

_COLUMNS = "id, date, title, comment, repeat"


class TaskStore:
    """
    SQLite task store for the scheduler.

    The schema matches files written by earlier scheduler versions
    (table `scheduler`) and is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection and closes it before returning
    - SQLite serializes writers; no extra locking here

    Errors:
    - engine failures -> StorageError (never logged here, the caller decides)
    - id matched nothing -> NotFoundError
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_FILE, *, limit: int = DEFAULT_LIMIT) -> None:
        self._db_path = Path(db_path)
        self._limit = max(1, int(limit))

        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            if not self._db_path.exists():
                self._db_path.touch()
                logger.info("TaskStore created db file %s", self._db_path)
        except OSError as exc:
            raise StorageError(f"cannot create database file {self._db_path}: {exc}") from exc

        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def limit(self) -> int:
        return self._limit

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Short-lived connection; sqlite3 errors leave as StorageError."""
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open {self._db_path}: {exc}") from exc

        try:
            conn.row_factory = sqlite3.Row
            self._configure_conn(conn)
            yield conn
        except sqlite3.IntegrityError as exc:
            raise InvalidTaskError(str(exc)) from exc
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS scheduler (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date VARCHAR(8) NULL,
                    title VARCHAR(64) NOT NULL CHECK (title <> ''),
                    comment VARCHAR(255) NULL,
                    repeat VARCHAR(128) NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(scheduler)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE scheduler ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("date", "VARCHAR(8) NULL")
            add_col("title", "VARCHAR(64) NOT NULL DEFAULT ''")
            add_col("comment", "VARCHAR(255) NULL")
            add_col("repeat", "VARCHAR(128) NULL")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_scheduler_date ON scheduler(date)")

            conn.commit()

    @staticmethod
    def _rows_to_tasks(rows: list[sqlite3.Row]) -> list[Task]:
        try:
            return [Task.from_row(r) for r in rows]
        except (TypeError, ValueError) as exc:
            raise StorageError(f"cannot decode task row: {exc}") from exc

    def _query_tasks(self, sql: str, params: dict[str, object]) -> list[Task]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return self._rows_to_tasks(cur.fetchall())

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM scheduler")
            (n,) = cur.fetchone()
            return int(n)

    def insert_task(self, task: Task) -> int:
        """Store a new task and return its id. task.id is ignored."""
        task.validate()

        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO scheduler (date, title, comment, repeat)
                VALUES (:date, :title, :comment, :repeat)
                """,
                {
                    "date": task.date,
                    "title": task.title,
                    "comment": task.comment,
                    "repeat": task.repeat,
                },
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise StorageError("SQLite did not return lastrowid for scheduler insert")
            task_id = int(rowid)
            logger.debug("Task added id=%s date=%s title=%r", task_id, task.date, task.title)
            return task_id

    def list_tasks(self) -> list[Task]:
        """Upcoming tasks: ordered by date (empty dates first), at most `limit` rows."""
        return self._query_tasks(
            f"""
            SELECT {_COLUMNS}
            FROM scheduler
            ORDER BY date ASC, id ASC
                LIMIT :limit
            """,
            {"limit": self._limit},
        )

    def search_tasks(self, search: str) -> list[Task]:
        """
        Substring search over title and comment.

        The text is wrapped as %text% and handed to LIKE unescaped, so '%' and '_'
        typed by the caller act as wildcards. Case sensitivity is SQLite's LIKE
        default (ASCII case-insensitive).
        """
        return self._query_tasks(
            f"""
            SELECT {_COLUMNS}
            FROM scheduler
            WHERE title LIKE :search OR comment LIKE :search
            ORDER BY date ASC, id ASC
                LIMIT :limit
            """,
            {"search": f"%{search}%", "limit": self._limit},
        )

    def search_tasks_by_date(self, date: str) -> list[Task]:
        return self._query_tasks(
            f"""
            SELECT {_COLUMNS}
            FROM scheduler
            WHERE date = :date
            ORDER BY date ASC, id ASC
                LIMIT :limit
            """,
            {"date": date, "limit": self._limit},
        )

    def read_task(self, task_id: int | str) -> Task:
        tid = parse_task_id(task_id)
        if tid is None:
            raise NotFoundError(task_id=task_id)

        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(f"SELECT {_COLUMNS} FROM scheduler WHERE id = :id", {"id": tid})
            row = cur.fetchone()

        if row is None:
            raise NotFoundError(task_id=task_id)
        return self._rows_to_tasks([row])[0]

    def update_task(self, task: Task) -> Task:
        """Overwrite every field of the task with id == task.id and echo it back."""
        task.validate()
        if parse_task_id(task.id) is None:
            raise NotFoundError("failed to update", task_id=task.id)

        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE scheduler
                SET date = :date,
                    title = :title,
                    comment = :comment,
                    repeat = :repeat
                WHERE id = :id
                """,
                {
                    "date": task.date,
                    "title": task.title,
                    "comment": task.comment,
                    "repeat": task.repeat,
                    "id": task.id,
                },
            )
            conn.commit()
            if cur.rowcount == 0:
                raise NotFoundError("failed to update", task_id=task.id)

        logger.debug("Task updated id=%s", task.id)
        return task

    def delete_task(self, task_id: int | str) -> None:
        tid = parse_task_id(task_id)
        if tid is None:
            raise NotFoundError("failed to delete", task_id=task_id)

        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM scheduler WHERE id = :id", {"id": tid})
            conn.commit()
            if cur.rowcount == 0:
                raise NotFoundError("failed to delete", task_id=task_id)

        logger.debug("Task deleted id=%s", tid)
