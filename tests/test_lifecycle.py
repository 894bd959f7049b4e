"""
Tests for the soft-delete lifecycle (jot.core.lifecycle).

Covers:
- classify() boundaries around the 30-day window
- restore() resetting any deleted task to active
- Scope filtering and purge target selection
"""

from datetime import datetime, timedelta

import pytest

from jot.core import lifecycle
from jot.core.constants import SCOPE_ALL, SCOPE_DELETED
from jot.core.exceptions import InvalidInputError
from jot.core.lifecycle import LifecycleState, classify
from jot.core.models import Task


NOW = datetime(2025, 6, 15, 12, 0, 0)


def deleted_task(task_id, days_ago, space_id=None):
    stamp = (NOW - timedelta(days=days_ago)).isoformat()
    return Task(id=task_id, text=f"Task {task_id}", space_id=space_id, deleted_at=stamp)


def test_classify_active_recoverable_purgeable():
    """None is active; under 30 days recoverable; 30 days or more purgeable."""
    assert classify(None, NOW) is LifecycleState.ACTIVE
    assert classify("", NOW) is LifecycleState.ACTIVE

    assert classify(NOW, NOW) is LifecycleState.RECOVERABLE
    assert classify(NOW - timedelta(days=29, hours=23, minutes=59), NOW) is LifecycleState.RECOVERABLE
    assert classify(NOW - timedelta(days=30), NOW) is LifecycleState.PURGEABLE
    assert classify(NOW - timedelta(days=400), NOW) is LifecycleState.PURGEABLE
    print("✓ classify() boundaries")


def test_classify_accepts_iso_strings():
    assert classify((NOW - timedelta(days=3)).isoformat(), NOW) is LifecycleState.RECOVERABLE
    assert classify("2025-05-01", NOW) is LifecycleState.PURGEABLE


def test_classify_future_stamp_is_recoverable():
    assert classify(NOW + timedelta(days=2), NOW) is LifecycleState.RECOVERABLE


def test_classify_unreadable_stamp_is_recoverable():
    assert classify("not a date", NOW) is LifecycleState.RECOVERABLE
    print("✓ Unreadable stamps are never purged")


@pytest.mark.parametrize("days_ago", [0, 10, 29, 30, 31, 365])
def test_restore_resets_any_deleted_task(days_ago):
    task = deleted_task(1, days_ago)

    restored = lifecycle.restore(task)

    assert restored.deleted_at is None
    assert classify(restored.deleted_at, NOW) is LifecycleState.ACTIVE
    # The original record is left untouched
    assert task.deleted_at is not None


def test_restore_active_task_is_rejected():
    with pytest.raises(InvalidInputError):
        lifecycle.restore(Task(id=1, text="Alive"))


def test_soft_delete_stamps_once():
    task = Task(id=1, text="Doomed")

    deleted = lifecycle.soft_delete(task, NOW)
    again = lifecycle.soft_delete(deleted, NOW + timedelta(days=5))

    assert deleted.deleted_at == NOW.isoformat()
    assert again is deleted
    assert task.deleted_at is None
    print("✓ Soft delete keeps the first stamp")


def test_recently_deleted_task_shows_in_deleted_view_only():
    """Ten days ago: recoverable and listed in DELETED; not in ALL."""
    task = deleted_task(1, 10)

    assert classify(task.deleted_at, NOW) is LifecycleState.RECOVERABLE
    assert lifecycle.select_view([task], SCOPE_DELETED, NOW) == [task]
    assert lifecycle.select_view([task], SCOPE_ALL, NOW) == []
    assert lifecycle.purge_targets([task], NOW) == []


def test_expired_task_leaves_deleted_view_and_becomes_purge_target():
    """Thirty-one days ago: purgeable, hidden from DELETED, swept by purge."""
    task = deleted_task(1, 31)

    assert classify(task.deleted_at, NOW) is LifecycleState.PURGEABLE
    assert lifecycle.select_view([task], SCOPE_DELETED, NOW) == []
    assert lifecycle.purge_targets([task], NOW) == [task]
    print("✓ Expired tasks move from the deleted view to the purge set")


def test_deleted_view_is_most_recent_first():
    tasks = [deleted_task(1, 5), deleted_task(2, 1), deleted_task(3, 20)]

    view = lifecycle.select_view(tasks, SCOPE_DELETED, NOW)

    assert [t.id for t in view] == [2, 1, 3]


def test_space_scope_shows_active_tasks_of_that_space():
    tasks = [
        Task(id=1, text="Work", space_id=7),
        Task(id=2, text="Home", space_id=8),
        Task(id=3, text="Unfiled"),
        deleted_task(4, 1, space_id=7),
    ]

    assert [t.id for t in lifecycle.select_view(tasks, 7, NOW)] == [1]
    assert [t.id for t in lifecycle.select_view(tasks, SCOPE_ALL, NOW)] == [1, 2, 3]
    assert [t.id for t in lifecycle.select_view(tasks, None, NOW)] == [1, 2, 3]
