"""
FILE: jot/core/repository.py
PURPOSE: Database operations and SQLite connection management
EXPORTS:
  - get_connection() -> Connection
  - connect() -> context manager yielding a Connection
  - init_database(conn) -> None
  - create_task(text, space_id, priority, due_date) -> Task
  - get_task(task_id) -> Task | None
  - list_tasks() -> List[Task]
  - update_task(task) -> None
  - delete_tasks(task_ids) -> int
  - create_space(name) -> Space
  - get_space(space_id) -> Space | None
  - list_spaces() -> List[Space]
  - delete_space(space_id, deleted_at) -> int
  - create_sublist(task_id, name) -> SubList
  - get_sublist(sublist_id) -> SubList | None
  - list_sublists(task_id) -> List[SubList]
  - rename_sublist(sublist_id, name) -> SubList
  - delete_sublist(sublist_id) -> None
  - add_sublist_item(sublist_id, text, priority, due_time) -> SubList
  - update_sublist_item(sublist_id, item) -> SubList
  - delete_sublist_item(sublist_id, item_id) -> SubList
DEPENDENCIES:
  - sqlite3, pathlib, contextlib (stdlib)
  - jot.config (database location)
  - jot.core.models (Task, Space, SubList, SubListItem)
  - jot.core.exceptions (not-found errors)
NOTES:
  - Database stored at JOT_DB_PATH (default ~/.jot/jot.db)
  - Auto-creates directory and initializes schema on first run
  - Returns domain objects, never raw rows
  - Deleting a space soft-deletes its active tasks in the same transaction
  - Sub-lists and their items are hard-deleted; only tasks are soft-deleted
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ..config import get_settings
from .dates import now_iso
from .models import Task, Space, SubList, SubListItem
from .exceptions import (
    TaskNotFoundError,
    SpaceNotFoundError,
    SubListNotFoundError,
    SubListItemNotFoundError,
)


# Database file location
DB_PATH = get_settings().db_path
DB_DIR = DB_PATH.parent

# Schema ships inside the package
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection() -> sqlite3.Connection:
    """
    Get SQLite connection to the jot database.

    Creates the database directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Enables foreign key constraints.
    Initializes database schema on first connection.
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    # Required for ON DELETE CASCADE / SET NULL
    conn.execute("PRAGMA foreign_keys = ON")

    init_database(conn)

    return conn


@contextmanager
def connect() -> Iterator[sqlite3.Connection]:
    """Open a connection, commit on success, roll back on error, always close."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='tasks'"
    )
    tables_exist = cursor.fetchone() is not None

    if not tables_exist:
        schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")
        conn.executescript(schema_sql)
        conn.commit()


# --- Task Operations ---


def create_task(
    text: str,
    space_id: Optional[int] = None,
    priority: str = "none",
    due_date: Optional[str] = None,
    completed: bool = False,
) -> Task:
    """
    Create a new task.

    Args:
        text: Task text (required)
        space_id: Optional space to file the task under
        priority: One of none/priority/high
        due_date: Optional ISO-8601 date
        completed: Initial completion flag

    Returns:
        Newly created Task object

    Note:
        Sets created_at automatically; deleted_at starts as NULL.
    """
    with connect() as conn:
        cursor = conn.execute(
            """
            INSERT INTO tasks (text, completed, space_id, priority, due_date, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (text, int(completed), space_id, priority, due_date, now_iso()),
        )
        task_id = cursor.lastrowid

    task = get_task(task_id)
    if not task:
        raise TaskNotFoundError(task_id)

    return task


def get_task(task_id: int) -> Optional[Task]:
    """
    Fetch single task by ID (deleted or not).

    Returns:
        Task object if found, None otherwise
    """
    with connect() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()

    return Task.from_row(row) if row else None


def list_tasks() -> List[Task]:
    """
    List all tasks, including soft-deleted ones.

    Returns:
        Tasks in creation order (oldest first)
    """
    with connect() as conn:
        rows = conn.execute("SELECT * FROM tasks ORDER BY created_at, id").fetchall()

    return [Task.from_row(row) for row in rows]


def update_task(task: Task) -> None:
    """
    Update existing task.

    Args:
        task: Task object with updated fields

    Note:
        Writes every mutable field, including deleted_at, so soft-delete
        and restore are plain updates. created_at is never rewritten.
    """
    with connect() as conn:
        conn.execute(
            """
            UPDATE tasks
            SET text = ?,
                completed = ?,
                space_id = ?,
                priority = ?,
                due_date = ?,
                deleted_at = ?
            WHERE id = ?
            """,
            (
                task.text,
                int(task.completed),
                task.space_id,
                task.priority,
                task.due_date,
                task.deleted_at,
                task.id,
            ),
        )


def delete_tasks(task_ids: Iterable[int]) -> int:
    """
    Permanently delete tasks (purge).

    Returns:
        Number of rows removed

    Note:
        Sub-lists of purged tasks go with them (ON DELETE CASCADE).
    """
    ids = list(task_ids)
    if not ids:
        return 0

    with connect() as conn:
        cursor = conn.executemany("DELETE FROM tasks WHERE id = ?", [(i,) for i in ids])
        return cursor.rowcount


# --- Space Operations ---


def create_space(name: str) -> Space:
    """
    Create a new space.

    Returns:
        Newly created Space object
    """
    with connect() as conn:
        cursor = conn.execute(
            "INSERT INTO spaces (name, created_at) VALUES (?, ?)",
            (name, now_iso()),
        )
        space_id = cursor.lastrowid

    space = get_space(space_id)
    if not space:
        raise SpaceNotFoundError(space_id)

    return space


def get_space(space_id: int) -> Optional[Space]:
    """
    Fetch single space by ID.

    Returns:
        Space object if found, None otherwise
    """
    with connect() as conn:
        row = conn.execute("SELECT * FROM spaces WHERE id = ?", (space_id,)).fetchone()

    return Space.from_row(row) if row else None


def list_spaces() -> List[Space]:
    """
    List all spaces.

    Returns:
        Spaces in creation order
    """
    with connect() as conn:
        rows = conn.execute("SELECT * FROM spaces ORDER BY id").fetchall()

    return [Space.from_row(row) for row in rows]


def delete_space(space_id: int, deleted_at: str) -> int:
    """
    Delete a space and soft-delete its active tasks.

    Args:
        space_id: ID of space to delete
        deleted_at: Stamp to put on the space's active tasks

    Returns:
        Number of tasks soft-deleted

    Raises:
        SpaceNotFoundError: If space doesn't exist

    Note:
        Tasks already deleted keep their original stamp. Every task of
        the space has space_id set to NULL by the schema.
    """
    if not get_space(space_id):
        raise SpaceNotFoundError(space_id)

    with connect() as conn:
        cursor = conn.execute(
            "UPDATE tasks SET deleted_at = ? WHERE space_id = ? AND deleted_at IS NULL",
            (deleted_at, space_id),
        )
        affected = cursor.rowcount
        conn.execute("DELETE FROM spaces WHERE id = ?", (space_id,))

    return affected


# --- Sub-list Operations ---


def _load_items(conn: sqlite3.Connection, sublist_id: int) -> List[SubListItem]:
    rows = conn.execute(
        "SELECT * FROM sublist_items WHERE sublist_id = ? ORDER BY id",
        (sublist_id,),
    ).fetchall()
    return [SubListItem.from_row(row) for row in rows]


def create_sublist(task_id: int, name: str) -> SubList:
    """
    Attach a new, empty sub-list to a task.

    Raises:
        TaskNotFoundError: If task doesn't exist
    """
    if not get_task(task_id):
        raise TaskNotFoundError(task_id)

    with connect() as conn:
        cursor = conn.execute(
            "INSERT INTO sublists (task_id, name) VALUES (?, ?)",
            (task_id, name),
        )
        sublist_id = cursor.lastrowid

    sublist = get_sublist(sublist_id)
    if not sublist:
        raise SubListNotFoundError(sublist_id)

    return sublist


def get_sublist(sublist_id: int) -> Optional[SubList]:
    """
    Fetch a sub-list with its items.

    Returns:
        SubList object if found, None otherwise
    """
    with connect() as conn:
        row = conn.execute("SELECT * FROM sublists WHERE id = ?", (sublist_id,)).fetchone()
        if not row:
            return None
        return SubList.from_row(row, _load_items(conn, sublist_id))


def list_sublists(task_id: int) -> List[SubList]:
    """
    List the sub-lists attached to a task, with their items.

    Returns:
        Sub-lists in creation order (empty if the task has none)
    """
    with connect() as conn:
        rows = conn.execute(
            "SELECT * FROM sublists WHERE task_id = ? ORDER BY id",
            (task_id,),
        ).fetchall()
        return [SubList.from_row(row, _load_items(conn, row["id"])) for row in rows]


def rename_sublist(sublist_id: int, name: str) -> SubList:
    """
    Raises:
        SubListNotFoundError: If sub-list doesn't exist
    """
    with connect() as conn:
        cursor = conn.execute(
            "UPDATE sublists SET name = ? WHERE id = ?", (name, sublist_id)
        )
        found = cursor.rowcount > 0

    if not found:
        raise SubListNotFoundError(sublist_id)

    return get_sublist(sublist_id)


def delete_sublist(sublist_id: int) -> None:
    """
    Permanently delete a sub-list and its items.

    Raises:
        SubListNotFoundError: If sub-list doesn't exist
    """
    with connect() as conn:
        cursor = conn.execute("DELETE FROM sublists WHERE id = ?", (sublist_id,))
        found = cursor.rowcount > 0

    if not found:
        raise SubListNotFoundError(sublist_id)


def add_sublist_item(
    sublist_id: int,
    text: str,
    priority: str = "none",
    due_time: Optional[str] = None,
) -> SubList:
    """
    Append an item to a sub-list.

    Returns:
        The updated SubList

    Raises:
        SubListNotFoundError: If sub-list doesn't exist
    """
    if not get_sublist(sublist_id):
        raise SubListNotFoundError(sublist_id)

    with connect() as conn:
        conn.execute(
            """
            INSERT INTO sublist_items (sublist_id, text, completed, priority, due_time, created_at)
            VALUES (?, ?, 0, ?, ?, ?)
            """,
            (sublist_id, text, priority, due_time, now_iso()),
        )

    return get_sublist(sublist_id)


def update_sublist_item(sublist_id: int, item: SubListItem) -> SubList:
    """
    Write back an item's mutable fields.

    Returns:
        The updated SubList

    Raises:
        SubListNotFoundError: If sub-list doesn't exist
        SubListItemNotFoundError: If the item isn't in that sub-list
    """
    if not get_sublist(sublist_id):
        raise SubListNotFoundError(sublist_id)

    with connect() as conn:
        cursor = conn.execute(
            """
            UPDATE sublist_items
            SET text = ?, completed = ?, priority = ?, due_time = ?
            WHERE id = ? AND sublist_id = ?
            """,
            (item.text, int(item.completed), item.priority, item.due_time, item.id, sublist_id),
        )
        found = cursor.rowcount > 0

    if not found:
        raise SubListItemNotFoundError(sublist_id, item.id)

    return get_sublist(sublist_id)


def delete_sublist_item(sublist_id: int, item_id: int) -> SubList:
    """
    Permanently remove an item from a sub-list.

    Returns:
        The updated SubList

    Raises:
        SubListNotFoundError: If sub-list doesn't exist
        SubListItemNotFoundError: If the item isn't in that sub-list
    """
    if not get_sublist(sublist_id):
        raise SubListNotFoundError(sublist_id)

    with connect() as conn:
        cursor = conn.execute(
            "DELETE FROM sublist_items WHERE id = ? AND sublist_id = ?",
            (item_id, sublist_id),
        )
        found = cursor.rowcount > 0

    if not found:
        raise SubListItemNotFoundError(sublist_id, item_id)

    return get_sublist(sublist_id)
