"""
FILE: jot/core/service.py
PURPOSE: Business logic layer for tasks, spaces and sub-lists
EXPORTS:
  - create_task(text, space_id, priority, due_date) -> Task
  - get_task(task_id) -> Task
  - list_tasks(scope, now) -> List[Task]
  - arrange_tasks(scope, sort_key, now) -> List[Group]
  - update_task_text(task_id, new_text) -> Task
  - set_task_priority(task_id, priority) -> Task
  - set_task_due_date(task_id, due_date) -> Task
  - complete_task(task_id) / uncomplete_task(task_id) -> Task
  - assign_task_to_space(task_id, space_id) -> Task
  - delete_task(task_id, now) -> Task          (soft delete)
  - restore_task(task_id) -> Task
  - list_purge_targets(now) -> List[Task]
  - purge_deleted_tasks(now) -> List[Task]
  - create_space(name) / list_spaces() / get_space(space_id)
  - find_space_by_name(name) / find_space_by_name_or_raise(name)
  - delete_space(space_id, now) -> int         (cascading soft delete)
  - resolve_scope(value) -> str | int
  - create_sublist(task_id, name) / list_sublists(task_id) / get_sublist(sublist_id)
  - rename_sublist(sublist_id, name) / delete_sublist(sublist_id)
  - add_sublist_item / update_sublist_item / complete_sublist_item / delete_sublist_item
  - arrange_sublist(sublist_id, sort_key) -> (SubList, List[Group])
DEPENDENCIES:
  - jot.core.repository (all persistence)
  - jot.core.arrange (ordering and grouping)
  - jot.core.lifecycle (soft-delete rules and scope filtering)
  - jot.core.exceptions (error types)
NOTES:
  - All functions validate input and raise descriptive errors
  - No direct database access (use repository layer)
  - Returns domain objects, never dicts or raw SQL results
  - Only tasks are soft-deleted; sub-lists and items are removed for good
  - Functions that depend on the clock take an optional `now`
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

from . import repository, lifecycle, dates
from .arrange import Group, arrange, normalize_sort_key, ITEM_DUE, TASK_DUE
from .models import Task, Space, SubList
from .constants import (
    VALID_PRIORITIES,
    DEFAULT_PRIORITY,
    DEFAULT_SORT_KEY,
    DEFAULT_SUBLIST_NAME,
    DEFAULT_ITEM_TEXT,
    SCOPE_ALL,
    SCOPE_DELETED,
    RESERVED_SCOPES,
)
from .exceptions import (
    TaskNotFoundError,
    SpaceNotFoundError,
    SubListNotFoundError,
    SubListItemNotFoundError,
    InvalidInputError,
)


logger = logging.getLogger(__name__)


def _validate_priority(priority: Optional[str]) -> str:
    value = (priority or DEFAULT_PRIORITY).strip().lower()
    if value not in VALID_PRIORITIES:
        raise InvalidInputError(
            f"Invalid priority '{priority}'. Must be one of: {', '.join(VALID_PRIORITIES)}"
        )
    return value


def _clean_optional(value: Optional[str]) -> Optional[str]:
    """Strip a due value; blank means 'no value'."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_task_or_raise(task_id: int) -> Task:
    task = repository.get_task(task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    return task


# --- Tasks ---


def create_task(
    text: str,
    space_id: Optional[int] = None,
    priority: str = DEFAULT_PRIORITY,
    due_date: Optional[str] = None,
) -> Task:
    """
    Create a new task with validation.

    Args:
        text: Task text (required, must not be empty)
        space_id: Optional space to file the task under
        priority: none/priority/high (defaults to none)
        due_date: Optional ISO-8601 date ("YYYY-MM-DD")

    Returns:
        Newly created Task object

    Raises:
        InvalidInputError: If text is empty or priority is unknown
        SpaceNotFoundError: If space_id doesn't exist

    Notes:
        - Trims whitespace from text
        - The due date is stored as given; unparseable dates simply sort
          as "No Due Date"
    """
    text = (text or "").strip()
    if not text:
        raise InvalidInputError("Task text cannot be empty")

    priority = _validate_priority(priority)

    if space_id is not None and not repository.get_space(space_id):
        raise SpaceNotFoundError(space_id)

    task = repository.create_task(
        text=text,
        space_id=space_id,
        priority=priority,
        due_date=_clean_optional(due_date),
    )
    logger.info("Created task %s", task.id)

    return task


def get_task(task_id: int) -> Task:
    """
    Fetch a task (deleted or not).

    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    return _get_task_or_raise(task_id)


def list_tasks(
    scope: Union[str, int, None] = SCOPE_ALL,
    now: Optional[datetime] = None,
) -> List[Task]:
    """
    List the tasks visible in a scope.

    Args:
        scope: "ALL", "DELETED", a space id, or a space name
        now: Reference time for the retention window

    Returns:
        ALL / space: active tasks in creation order.
        DELETED: tasks deleted within the retention window, most recent first.

    Raises:
        SpaceNotFoundError / InvalidInputError: If the scope names no space
    """
    resolved = resolve_scope(scope)
    tasks = lifecycle.select_view(repository.list_tasks(), resolved, now)
    logger.debug("Scope %r shows %d task(s)", resolved, len(tasks))
    return tasks


def arrange_tasks(
    scope: Union[str, int, None] = SCOPE_ALL,
    sort_key: Optional[str] = DEFAULT_SORT_KEY,
    now: Optional[datetime] = None,
) -> List[Group]:
    """
    List a scope's tasks ready for display.

    Returns:
        Groups from arrange() for ALL and space scopes. The DELETED scope
        is not re-sorted: it comes back as a single unlabelled group in
        deletion order (or no group when empty).

    Raises:
        InvalidInputError: If sort_key is unknown
    """
    sort_key = normalize_sort_key(sort_key)
    resolved = resolve_scope(scope)
    tasks = list_tasks(resolved, now)

    if resolved == SCOPE_DELETED:
        return [Group(label=None, items=tasks)] if tasks else []

    return arrange(tasks, sort_key, TASK_DUE)


def update_task_text(task_id: int, new_text: str) -> Task:
    """
    Update task text.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
        InvalidInputError: If new_text is empty
    """
    new_text = (new_text or "").strip()
    if not new_text:
        raise InvalidInputError("Task text cannot be empty")

    task = _get_task_or_raise(task_id)
    task.text = new_text
    repository.update_task(task)

    return task


def set_task_priority(task_id: int, priority: str) -> Task:
    """
    Raises:
        TaskNotFoundError: If task_id doesn't exist
        InvalidInputError: If priority is unknown
    """
    priority = _validate_priority(priority)

    task = _get_task_or_raise(task_id)
    task.priority = priority
    repository.update_task(task)

    return task


def set_task_due_date(task_id: int, due_date: Optional[str]) -> Task:
    """
    Set or clear (None / blank) a task's due date.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    task = _get_task_or_raise(task_id)
    task.due_date = _clean_optional(due_date)
    repository.update_task(task)

    return task


def complete_task(task_id: int) -> Task:
    """
    Mark task as complete.

    Raises:
        TaskNotFoundError: If task_id doesn't exist

    Notes:
        - Idempotent: completing a completed task is safe
    """
    task = _get_task_or_raise(task_id)
    task.completed = True
    repository.update_task(task)
    logger.info("Completed task %s", task_id)

    return task


def uncomplete_task(task_id: int) -> Task:
    """
    Mark task as not complete.

    Raises:
        TaskNotFoundError: If task_id doesn't exist
    """
    task = _get_task_or_raise(task_id)
    task.completed = False
    repository.update_task(task)

    return task


def assign_task_to_space(task_id: int, space_id: Optional[int]) -> Task:
    """
    File a task under a space, or unassign it (space_id=None).

    Raises:
        TaskNotFoundError: If task_id doesn't exist
        SpaceNotFoundError: If space_id doesn't exist
    """
    task = _get_task_or_raise(task_id)

    if space_id is not None and not repository.get_space(space_id):
        raise SpaceNotFoundError(space_id)

    task.space_id = space_id
    repository.update_task(task)

    return task


def delete_task(task_id: int, now: Optional[datetime] = None) -> Task:
    """
    Soft-delete a task (it stays restorable for RETENTION_DAYS).

    Returns:
        The task with deleted_at set

    Raises:
        TaskNotFoundError: If task_id doesn't exist

    Notes:
        - Deleting an already deleted task keeps its original stamp
    """
    task = _get_task_or_raise(task_id)
    deleted = lifecycle.soft_delete(task, now)

    if deleted is not task:
        repository.update_task(deleted)
        logger.info("Soft-deleted task %s", task_id)

    return deleted


def restore_task(task_id: int) -> Task:
    """
    Bring a soft-deleted task back.

    Works for any deleted task that hasn't been purged yet, even past the
    retention window.

    Raises:
        TaskNotFoundError: If task_id doesn't exist (or was purged)
        InvalidInputError: If the task isn't deleted
    """
    task = _get_task_or_raise(task_id)
    restored = lifecycle.restore(task)
    repository.update_task(restored)
    logger.info("Restored task %s", task_id)

    return restored


def list_purge_targets(now: Optional[datetime] = None) -> List[Task]:
    """Deleted tasks past the retention window."""
    return lifecycle.purge_targets(repository.list_tasks(), now)


def purge_deleted_tasks(now: Optional[datetime] = None) -> List[Task]:
    """
    Permanently remove every task deleted at least RETENTION_DAYS ago.

    Returns:
        The purged tasks (as they were before removal)

    Notes:
        - Maintenance operation; nothing else ever hard-deletes a task
        - Sub-lists of purged tasks are removed with them
    """
    targets = list_purge_targets(now)
    removed = repository.delete_tasks(t.id for t in targets)
    logger.info("Purged %d task(s)", removed)

    return targets


# --- Spaces ---


def create_space(name: str) -> Space:
    """
    Create a new space with validation.

    Raises:
        InvalidInputError: If name is empty or a reserved scope name
    """
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Space name cannot be empty")

    if name.upper() in RESERVED_SCOPES:
        raise InvalidInputError(f"'{name}' is reserved and can't be used as a space name")

    space = repository.create_space(name)
    logger.info("Created space %s (%s)", space.id, space.name)

    return space


def list_spaces() -> List[Space]:
    """List all spaces in creation order."""
    return repository.list_spaces()


def get_space(space_id: int) -> Optional[Space]:
    """
    Get a single space by ID.

    Returns:
        Space object if found, None otherwise
    """
    return repository.get_space(space_id)


def find_space_by_name(name: str) -> Optional[Space]:
    """Find space by name (case-insensitive)."""
    spaces = list_spaces()
    return next((s for s in spaces if s.name.lower() == name.strip().lower()), None)


def find_space_by_name_or_raise(name: str) -> Space:
    """
    Find space by name (case-insensitive), raising error if not found.

    Raises:
        InvalidInputError: If space not found (with available names)
    """
    space = find_space_by_name(name)
    if not space:
        available = ", ".join([s.name for s in list_spaces()]) or "none"
        raise InvalidInputError(
            f"Space '{name}' not found. Available spaces: {available}"
        )
    return space


def delete_space(space_id: int, now: Optional[datetime] = None) -> int:
    """
    Delete a space; its active tasks are soft-deleted, never removed.

    Returns:
        Number of tasks moved to the deleted scope

    Raises:
        SpaceNotFoundError: If space_id doesn't exist
    """
    stamp = (now if now is not None else dates.now()).isoformat()
    affected = repository.delete_space(space_id, stamp)
    logger.info("Deleted space %s, soft-deleted %d task(s)", space_id, affected)

    return affected


def resolve_scope(value: Union[str, int, None]) -> Union[str, int]:
    """
    Turn user input into a scope: SCOPE_ALL, SCOPE_DELETED or a space id.

    Accepts None, "all", "deleted" (any case), a space name or a space id
    (int or digits). Text is matched against space names first, so a space
    called "2025" wins over space #2025.

    Raises:
        SpaceNotFoundError: If a space id doesn't exist
        InvalidInputError: If a space name doesn't exist
    """
    if value is None:
        return SCOPE_ALL

    if isinstance(value, int):
        space_id = value
    else:
        text = str(value).strip()
        if not text or text.upper() == SCOPE_ALL:
            return SCOPE_ALL
        if text.upper() == SCOPE_DELETED:
            return SCOPE_DELETED
        space = find_space_by_name(text)
        if space:
            return space.id
        if not text.isdigit():
            return find_space_by_name_or_raise(text).id
        space_id = int(text)

    if not repository.get_space(space_id):
        raise SpaceNotFoundError(space_id)
    return space_id


# --- Sub-lists ---


def _get_sublist_or_raise(sublist_id: int) -> SubList:
    sublist = repository.get_sublist(sublist_id)
    if not sublist:
        raise SubListNotFoundError(sublist_id)
    return sublist


def create_sublist(task_id: Optional[int], name: Optional[str] = None) -> SubList:
    """
    Attach a new checklist to a task.

    Args:
        task_id: Owning task (required)
        name: List name (defaults to "New List")

    Raises:
        InvalidInputError: If task_id is missing
        TaskNotFoundError: If the task doesn't exist
    """
    if task_id is None:
        raise InvalidInputError("task_id is required")

    name = (name or "").strip() or DEFAULT_SUBLIST_NAME
    sublist = repository.create_sublist(task_id, name)
    logger.info("Created sub-list %s on task %s", sublist.id, task_id)

    return sublist


def list_sublists(task_id: Optional[int]) -> List[SubList]:
    """
    List a task's sub-lists (empty if it has none).

    Raises:
        InvalidInputError: If task_id is missing
    """
    if task_id is None:
        raise InvalidInputError("task_id is required")
    return repository.list_sublists(task_id)


def get_sublist(sublist_id: int) -> SubList:
    """
    Raises:
        SubListNotFoundError: If sublist_id doesn't exist
    """
    return _get_sublist_or_raise(sublist_id)


def rename_sublist(sublist_id: int, name: str) -> SubList:
    """
    Raises:
        InvalidInputError: If name is empty
        SubListNotFoundError: If sublist_id doesn't exist
    """
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Sub-list name cannot be empty")
    return repository.rename_sublist(sublist_id, name)


def delete_sublist(sublist_id: int) -> None:
    """
    Permanently delete a sub-list and its items.

    Raises:
        SubListNotFoundError: If sublist_id doesn't exist
    """
    repository.delete_sublist(sublist_id)
    logger.info("Deleted sub-list %s", sublist_id)


def add_sublist_item(
    sublist_id: int,
    text: Optional[str] = None,
    priority: str = DEFAULT_PRIORITY,
    due_time: Optional[str] = None,
) -> SubList:
    """
    Add an item to a sub-list.

    Args:
        sublist_id: Parent sub-list
        text: Item text (blank becomes "Untitled")
        priority: none/priority/high
        due_time: Optional "HH:MM"

    Returns:
        The updated SubList

    Raises:
        InvalidInputError: If priority is unknown
        SubListNotFoundError: If sublist_id doesn't exist
    """
    text = (text or "").strip() or DEFAULT_ITEM_TEXT
    priority = _validate_priority(priority)

    return repository.add_sublist_item(
        sublist_id,
        text=text,
        priority=priority,
        due_time=_clean_optional(due_time),
    )


def update_sublist_item(
    sublist_id: int,
    item_id: int,
    text: Optional[str] = None,
    priority: Optional[str] = None,
    due_time: Optional[str] = None,
    completed: Optional[bool] = None,
) -> SubList:
    """
    Edit an item in place. Arguments left as None keep their value.

    Notes:
        - due_time="" clears the due time

    Raises:
        InvalidInputError: If text is blank or priority unknown
        SubListNotFoundError / SubListItemNotFoundError: If ids don't resolve
    """
    sublist = _get_sublist_or_raise(sublist_id)
    item = sublist.get_item(item_id)
    if not item:
        raise SubListItemNotFoundError(sublist_id, item_id)

    if text is not None:
        text = text.strip()
        if not text:
            raise InvalidInputError("Item text cannot be empty")
        item.text = text

    if priority is not None:
        item.priority = _validate_priority(priority)

    if due_time is not None:
        item.due_time = _clean_optional(due_time)

    if completed is not None:
        item.completed = completed

    return repository.update_sublist_item(sublist_id, item)


def complete_sublist_item(sublist_id: int, item_id: int, completed: bool = True) -> SubList:
    """Tick (or untick) a checklist item."""
    return update_sublist_item(sublist_id, item_id, completed=completed)


def delete_sublist_item(sublist_id: int, item_id: int) -> SubList:
    """
    Permanently remove an item.

    Raises:
        SubListNotFoundError / SubListItemNotFoundError: If ids don't resolve
    """
    return repository.delete_sublist_item(sublist_id, item_id)


def arrange_sublist(
    sublist_id: int,
    sort_key: Optional[str] = DEFAULT_SORT_KEY,
) -> Tuple[SubList, List[Group]]:
    """
    Fetch a sub-list and arrange its items (grouped by due time under "due").

    Raises:
        SubListNotFoundError: If sublist_id doesn't exist
        InvalidInputError: If sort_key is unknown
    """
    sublist = _get_sublist_or_raise(sublist_id)
    return sublist, arrange(sublist.items, sort_key, ITEM_DUE)
