"""
FILE: jot/core/lifecycle.py
PURPOSE: Soft-delete lifecycle of tasks (active -> recoverable -> purgeable)
EXPORTS:
  - LifecycleState (enum)
  - classify(deleted_at, now) -> LifecycleState
  - soft_delete(task, now) -> Task
  - restore(task) -> Task
  - is_visible(task, scope, now) -> bool
  - select_view(tasks, scope, now) -> List[Task]
  - purge_targets(tasks, now) -> List[Task]
DEPENDENCIES:
  - jot.core.constants (RETENTION_DAYS, SCOPE_ALL, SCOPE_DELETED)
  - jot.core.dates (parse_timestamp, now)
  - jot.core.models (Task)
NOTES:
  - Pure functions; transitions return a new Task, persistence is the caller's job
  - Recoverable -> Purgeable is purely a function of elapsed time
  - Restore only checks that the task is deleted, not the retention window
  - Soft-deleting a deleted task keeps its original stamp
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Union

from . import dates
from .constants import RETENTION_DAYS, SCOPE_ALL, SCOPE_DELETED
from .exceptions import InvalidInputError, MalformedInputError
from .models import Task


logger = logging.getLogger(__name__)

RETENTION = timedelta(days=RETENTION_DAYS)

Scope = Union[str, int, None]


class LifecycleState(str, Enum):
    """Where a task sits in the soft-delete lifecycle."""

    ACTIVE = "active"
    RECOVERABLE = "recoverable"
    PURGEABLE = "purgeable"


def classify(deleted_at: Optional[dates.Timestamp], now: Optional[datetime] = None) -> LifecycleState:
    """
    Classify a deletion stamp.

    Args:
        deleted_at: Deletion timestamp (ISO string or datetime), None if active
        now: Reference time (defaults to current local time)

    Returns:
        ACTIVE when deleted_at is None, PURGEABLE when it is at least
        RETENTION_DAYS old, RECOVERABLE otherwise

    Notes:
        - A stamp in the future counts as RECOVERABLE
        - An unparseable stamp counts as RECOVERABLE (never auto-purged)
    """
    if deleted_at is None or deleted_at == "":
        return LifecycleState.ACTIVE

    reference = dates.parse_timestamp(now) if now is not None else dates.now()

    try:
        stamp = dates.parse_timestamp(deleted_at)
    except MalformedInputError as e:
        logger.warning("Unreadable deletion stamp, keeping task recoverable: %s", e)
        return LifecycleState.RECOVERABLE

    if reference - stamp >= RETENTION:
        return LifecycleState.PURGEABLE
    return LifecycleState.RECOVERABLE


def soft_delete(task: Task, now: Optional[datetime] = None) -> Task:
    """Active -> Recoverable. Returns the task unchanged if already deleted."""
    if task.deleted_at is not None:
        return task
    stamp = now if now is not None else dates.now()
    return replace(task, deleted_at=stamp.isoformat())


def restore(task: Task) -> Task:
    """
    Recoverable/Purgeable -> Active.

    Raises:
        InvalidInputError: If the task isn't deleted
    """
    if task.deleted_at is None:
        raise InvalidInputError(f"Task {task.id} is not deleted")
    return replace(task, deleted_at=None)


def is_visible(task: Task, scope: Scope = SCOPE_ALL, now: Optional[datetime] = None) -> bool:
    """
    Whether task shows up in the given scope.

    Args:
        task: Task to test
        scope: SCOPE_ALL (or None), SCOPE_DELETED, or a space id
        now: Reference time

    Notes:
        - ALL and space scopes show active tasks only
        - DELETED shows recoverable tasks only (purgeable ones are hidden)
    """
    state = classify(task.deleted_at, now)

    if scope == SCOPE_DELETED:
        return state is LifecycleState.RECOVERABLE

    if state is not LifecycleState.ACTIVE:
        return False

    if scope is None or scope == SCOPE_ALL:
        return True

    return task.space_id == scope


def _deleted_sort_key(task: Task) -> datetime:
    try:
        return dates.parse_timestamp(task.deleted_at)
    except MalformedInputError:
        return datetime.min


def select_view(
    tasks: Iterable[Task],
    scope: Scope = SCOPE_ALL,
    now: Optional[datetime] = None,
) -> List[Task]:
    """
    Filter tasks down to a scope.

    Returns:
        Visible tasks in input order, except DELETED which is ordered by
        deleted_at, most recent first
    """
    visible = [t for t in tasks if is_visible(t, scope, now)]

    if scope == SCOPE_DELETED:
        visible.sort(key=_deleted_sort_key, reverse=True)

    return visible


def purge_targets(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    """Tasks whose deletion is older than the retention window."""
    return [t for t in tasks if classify(t.deleted_at, now) is LifecycleState.PURGEABLE]
