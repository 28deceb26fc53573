# tests/test_task_store.py

from __future__ import annotations

import random
import sqlite3
from pathlib import Path

import pytest

from scheduler_db.tasks.task_errors import InvalidTaskError, NotFoundError, StorageError
from scheduler_db.tasks.task_models import Task
from scheduler_db.tasks.task_store import TaskStore

# Larger than any SQLite INTEGER.
TOO_BIG = "99999999999999999999"


def _task(title: str, date: str = "", comment: str = "", repeat: str = "") -> Task:
    return Task(date=date, title=title, comment=comment, repeat=repeat)


def test_insert_returns_increasing_ids(store: TaskStore) -> None:
    ids = [store.insert_task(_task(f"task {i}")) for i in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5
    assert ids[0] > 0


def test_insert_ignores_caller_id(store: TaskStore) -> None:
    task_id = store.insert_task(Task(id=999, title="mine"))
    assert task_id != 999
    assert store.read_task(task_id).title == "mine"


def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    first = store.insert_task(_task("a"))
    second = store.insert_task(_task("b"))
    store.delete_task(second)
    third = store.insert_task(_task("c"))
    assert third > second > first


def test_insert_empty_title_fails(store: TaskStore) -> None:
    with pytest.raises(StorageError) as exc_info:
        store.insert_task(_task(""))
    assert isinstance(exc_info.value, InvalidTaskError)
    assert exc_info.value.field == "title"
    assert store.count_tasks() == 0


@pytest.mark.parametrize(
    "task, field",
    [
        (_task("x" * 65), "title"),
        (_task("ok", date="2024011"), "date"),
        (_task("ok", date="202401011"), "date"),
        (_task("ok", comment="c" * 256), "comment"),
        (_task("ok", repeat="r" * 129), "repeat"),
    ],
)
def test_insert_rejects_out_of_bounds_fields(store: TaskStore, task: Task, field: str) -> None:
    with pytest.raises(InvalidTaskError) as exc_info:
        store.insert_task(task)
    assert exc_info.value.field == field


def test_insert_accepts_fields_at_their_limits(store: TaskStore) -> None:
    task = _task("x" * 64, date="20240101", comment="c" * 255, repeat="r" * 128)
    task_id = store.insert_task(task)
    got = store.read_task(task_id)
    assert (got.title, got.comment, got.repeat) == (task.title, task.comment, task.repeat)


def test_empty_title_rejected_by_schema(store: TaskStore) -> None:
    conn = sqlite3.connect(str(store.db_path))
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO scheduler (date, title) VALUES ('', '')")
    finally:
        conn.close()


def test_read_returns_inserted_task(store: TaskStore) -> None:
    task = _task("Dentist", date="20240315", comment="bring card", repeat="y")
    task_id = store.insert_task(task)

    got = store.read_task(task_id)
    assert got == Task(id=task_id, date="20240315", title="Dentist", comment="bring card", repeat="y")


def test_read_accepts_string_ids(store: TaskStore) -> None:
    task_id = store.insert_task(_task("by string"))
    assert store.read_task(str(task_id)).id == task_id
    assert store.read_task(f" {task_id} ").id == task_id


@pytest.mark.parametrize(
    "bad_id", [12345, "12345", "abc", "", "1_0", "\u0661\u0660", TOO_BIG, int(TOO_BIG)]
)
def test_read_missing_raises_not_found(store: TaskStore, bad_id) -> None:
    # Ids 1..10 exist, so "1_0" and Arabic-Indic "10" would hit a row if parsed leniently.
    for i in range(10):
        store.insert_task(_task(f"task {i}"))

    with pytest.raises(NotFoundError) as exc_info:
        store.read_task(bad_id)
    assert exc_info.value.task_id == bad_id
    assert not isinstance(exc_info.value, StorageError)


def test_null_columns_read_back_as_empty_strings(store: TaskStore) -> None:
    conn = sqlite3.connect(str(store.db_path))
    try:
        cur = conn.execute("INSERT INTO scheduler (title) VALUES ('bare')")
        conn.commit()
        task_id = cur.lastrowid
    finally:
        conn.close()

    got = store.read_task(task_id)
    assert got == Task(id=task_id, title="bare")


def test_list_orders_by_date_and_truncates(store: TaskStore) -> None:
    dates = [f"202401{d:02d}" for d in range(1, 26)]
    shuffled = list(dates)
    random.Random(7).shuffle(shuffled)
    for d in shuffled:
        store.insert_task(_task(f"on {d}", date=d))

    tasks = store.list_tasks()
    assert len(tasks) == 20
    assert [t.date for t in tasks] == dates[:20]


def test_list_puts_undated_tasks_first(store: TaskStore) -> None:
    store.insert_task(_task("later", date="20250101"))
    store.insert_task(_task("whenever"))
    store.insert_task(_task("sooner", date="20240101"))

    assert [t.title for t in store.list_tasks()] == ["whenever", "sooner", "later"]


def test_list_on_empty_store_returns_empty_list(store: TaskStore) -> None:
    assert store.list_tasks() == []
    assert store.search_tasks("anything") == []
    assert store.search_tasks_by_date("20240101") == []


def test_limit_is_configurable(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "small.db", limit=3)
    for i in range(5):
        store.insert_task(_task(f"t{i}", date=f"2024010{i + 1}"))
    assert [t.title for t in store.list_tasks()] == ["t0", "t1", "t2"]
    assert len(store.search_tasks("")) == 3


def test_update_overwrites_only_target(store: TaskStore) -> None:
    keep_id = store.insert_task(_task("keep", date="20240101", comment="same"))
    edit_id = store.insert_task(_task("edit", date="20240102", comment="old", repeat="d 1"))

    updated = Task(id=edit_id, date="20240201", title="edited", comment="", repeat="")
    assert store.update_task(updated) is updated

    assert store.read_task(edit_id) == updated
    assert store.read_task(keep_id) == Task(id=keep_id, date="20240101", title="keep", comment="same")


def test_update_missing_raises_not_found(store: TaskStore) -> None:
    with pytest.raises(NotFoundError, match="failed to update"):
        store.update_task(Task(id=42, title="ghost"))


def test_update_validates_before_writing(store: TaskStore) -> None:
    task_id = store.insert_task(_task("valid"))
    with pytest.raises(InvalidTaskError):
        store.update_task(Task(id=task_id, title=""))
    assert store.read_task(task_id).title == "valid"


def test_delete_removes_task(store: TaskStore) -> None:
    task_id = store.insert_task(_task("bye"))
    store.delete_task(task_id)
    with pytest.raises(NotFoundError):
        store.read_task(task_id)
    assert store.count_tasks() == 0


@pytest.mark.parametrize(
    "bad_id", [12345, "12345", "seven", "1_0", "\u0661\u0660", TOO_BIG, int(TOO_BIG)]
)
def test_delete_missing_raises_not_found(store: TaskStore, bad_id) -> None:
    for i in range(10):
        store.insert_task(_task(f"task {i}"))

    with pytest.raises(NotFoundError, match="failed to delete"):
        store.delete_task(bad_id)
    assert store.count_tasks() == 10


@pytest.mark.parametrize("bad_id", [int(TOO_BIG), -int(TOO_BIG), 2**63])
def test_update_out_of_range_id_raises_not_found(store: TaskStore, bad_id: int) -> None:
    with pytest.raises(NotFoundError, match="failed to update"):
        store.update_task(Task(id=bad_id, title="x"))


def test_search_matches_title_or_comment(store: TaskStore) -> None:
    store.insert_task(_task("Title A", date="20240102"))
    store.insert_task(_task("Other", date="20240101"))
    store.insert_task(_task("Groceries", date="20240103", comment="milk, tissues"))

    assert [t.title for t in store.search_tasks("ti")] == ["Title A", "Groceries"]
    assert [t.title for t in store.search_tasks("milk")] == ["Groceries"]
    assert store.search_tasks("nothing like this") == []


def test_search_empty_and_percent_return_everything(store: TaskStore) -> None:
    for i in range(3):
        store.insert_task(_task(f"plain {i}"))

    assert len(store.search_tasks("")) == 3
    # '%' is passed through to LIKE, so it matches any text.
    assert len(store.search_tasks("%")) == 3


def test_search_underscore_is_a_wildcard(store: TaskStore) -> None:
    store.insert_task(_task("a_b"))
    store.insert_task(_task("axb"))
    store.insert_task(_task("ab"))

    assert sorted(t.title for t in store.search_tasks("a_b")) == ["a_b", "axb"]


def test_search_by_date_matches_exactly(store: TaskStore) -> None:
    first = store.insert_task(_task("one", date="20240105"))
    store.insert_task(_task("other day", date="20240106"))
    second = store.insert_task(_task("two", date="20240105"))

    tasks = store.search_tasks_by_date("20240105")
    assert [t.id for t in tasks] == [first, second]
    assert store.search_tasks_by_date("2024010") == []


def test_round_trip_lifecycle(store: TaskStore) -> None:
    task_id = store.insert_task(_task("round", date="20240110"))
    assert store.read_task(task_id).title == "round"

    store.update_task(Task(id=task_id, date="20240111", title="round 2"))
    assert store.read_task(task_id).title == "round 2"

    store.delete_task(task_id)
    with pytest.raises(NotFoundError):
        store.read_task(task_id)


def test_reopen_keeps_data_and_schema(tmp_path: Path) -> None:
    db = tmp_path / "scheduler.db"
    first = TaskStore(db)
    task_id = first.insert_task(_task("persisted"))

    second = TaskStore(db)
    assert second.read_task(task_id).title == "persisted"
    assert second.count_tasks() == 1


def test_missing_file_is_created(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "dir" / "scheduler.db"
    assert not db.exists()
    TaskStore(db)
    assert db.exists()


def test_legacy_file_gets_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "legacy.db"
    conn = sqlite3.connect(str(db))
    try:
        conn.execute(
            "CREATE TABLE scheduler (id INTEGER PRIMARY KEY AUTOINCREMENT, "
            "date VARCHAR(8) NULL, title VARCHAR(64) NOT NULL, comment VARCHAR(255) NULL)"
        )
        conn.execute("INSERT INTO scheduler (date, title, comment) VALUES ('20230101', 'old', '')")
        conn.commit()
    finally:
        conn.close()

    store = TaskStore(db)
    task_id = store.insert_task(_task("new", repeat="w 1"))

    assert store.read_task(task_id).repeat == "w 1"
    assert [t.title for t in store.list_tasks()] == ["new", "old"]


def test_init_failure_raises_storage_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", "utf-8")

    with pytest.raises(StorageError):
        TaskStore(blocker / "scheduler.db")
