"""
Test suite for the service and repository layers.

Tests against a temporary SQLite database:
- Task CRUD, validation and completion
- Soft delete, restore and purge
- Spaces: scope resolution and cascading soft delete
- Sub-lists and their items
"""

from datetime import datetime, timedelta

import pytest

from jot.core import repository, service
from jot.core.constants import NO_DUE_DATE_LABEL, SCOPE_ALL, SCOPE_DELETED
from jot.core.exceptions import (
    InvalidInputError,
    SpaceNotFoundError,
    SubListItemNotFoundError,
    SubListNotFoundError,
    TaskNotFoundError,
)
from jot.core.lifecycle import LifecycleState, classify


# --- Test Fixtures ---

@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database for all tests."""
    db_path = tmp_path / "test_jot.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    yield db_path


# --- Tasks ---


def test_create_and_get_task():
    task = service.create_task("  Write report  ", priority="high", due_date="2025-03-01")

    fetched = service.get_task(task.id)
    assert fetched.text == "Write report"
    assert fetched.priority == "high"
    assert fetched.due_date == "2025-03-01"
    assert fetched.completed is False
    assert fetched.created_at is not None
    assert fetched.deleted_at is None
    print(f"✓ Created task {task.id}")


def test_create_task_validation():
    with pytest.raises(InvalidInputError):
        service.create_task("   ")
    with pytest.raises(InvalidInputError):
        service.create_task("Bad priority", priority="urgent")
    with pytest.raises(SpaceNotFoundError):
        service.create_task("Nowhere", space_id=999)


def test_priority_is_case_insensitive():
    task = service.create_task("Shout", priority="HIGH")
    assert task.priority == "high"


def test_get_missing_task_raises():
    with pytest.raises(TaskNotFoundError) as exc:
        service.get_task(42)
    assert "not found" in str(exc.value)


def test_update_task_fields():
    task = service.create_task("Draft")

    service.update_task_text(task.id, "Final")
    service.set_task_priority(task.id, "priority")
    service.set_task_due_date(task.id, "2025-04-01")
    updated = service.get_task(task.id)
    assert (updated.text, updated.priority, updated.due_date) == ("Final", "priority", "2025-04-01")

    cleared = service.set_task_due_date(task.id, "  ")
    assert cleared.due_date is None

    with pytest.raises(InvalidInputError):
        service.update_task_text(task.id, "")
    print("✓ Task fields update")


def test_complete_and_uncomplete():
    task = service.create_task("Laundry")

    assert service.complete_task(task.id).completed is True
    assert service.complete_task(task.id).completed is True
    assert service.uncomplete_task(task.id).completed is False


def test_arrange_tasks_groups_by_due_day():
    service.create_task("A", due_date="2025-03-01", priority="none")
    service.create_task("B", due_date="2025-03-01", priority="high")
    service.create_task("C")

    groups = service.arrange_tasks(SCOPE_ALL, "due")

    assert [g.label for g in groups] == ["2025-03-01", NO_DUE_DATE_LABEL]
    assert [[t.text for t in g.items] for g in groups] == [["B", "A"], ["C"]]
    print("✓ arrange_tasks groups by day")


def test_arrange_tasks_rejects_unknown_sort_key():
    with pytest.raises(InvalidInputError):
        service.arrange_tasks(SCOPE_ALL, "random")


# --- Soft delete, restore, purge ---


def test_delete_is_soft_and_restorable():
    task = service.create_task("Oops")

    deleted = service.delete_task(task.id)

    assert deleted.deleted_at is not None
    assert service.get_task(task.id).deleted_at == deleted.deleted_at
    assert service.list_tasks(SCOPE_ALL) == []
    assert [t.id for t in service.list_tasks(SCOPE_DELETED)] == [task.id]

    restored = service.restore_task(task.id)
    assert restored.deleted_at is None
    assert [t.id for t in service.list_tasks(SCOPE_ALL)] == [task.id]
    assert service.list_tasks(SCOPE_DELETED) == []
    print("✓ Soft delete then restore")


def test_deleting_twice_keeps_first_stamp():
    task = service.create_task("Once")
    first = service.delete_task(task.id, now=datetime(2025, 1, 1))
    second = service.delete_task(task.id, now=datetime(2025, 1, 5))

    assert second.deleted_at == first.deleted_at


def test_restore_active_task_is_invalid():
    task = service.create_task("Alive")
    with pytest.raises(InvalidInputError):
        service.restore_task(task.id)


def test_deleted_view_respects_retention_window():
    """Ten days ago: visible in DELETED. Thirty-one days ago: purge target."""
    now = datetime.now()
    recent = service.create_task("Recent")
    old = service.create_task("Old")

    service.delete_task(recent.id, now=now - timedelta(days=10))
    service.delete_task(old.id, now=now - timedelta(days=31))

    assert classify(service.get_task(recent.id).deleted_at, now) is LifecycleState.RECOVERABLE
    assert classify(service.get_task(old.id).deleted_at, now) is LifecycleState.PURGEABLE

    assert [t.id for t in service.list_tasks(SCOPE_DELETED, now)] == [recent.id]
    assert [t.id for t in service.list_purge_targets(now)] == [old.id]
    print("✓ Retention window splits deleted view and purge set")


def test_purge_removes_only_expired_tasks():
    now = datetime.now()
    keep = service.create_task("Keep")
    recent = service.create_task("Recent")
    old = service.create_task("Old")
    sublist = service.create_sublist(old.id, "Checklist")

    service.delete_task(recent.id, now=now - timedelta(days=2))
    service.delete_task(old.id, now=now - timedelta(days=45))

    purged = service.purge_deleted_tasks(now)

    assert [t.id for t in purged] == [old.id]
    assert repository.get_task(old.id) is None
    assert repository.get_task(recent.id) is not None
    assert repository.get_task(keep.id) is not None
    # Sub-lists go with their task
    assert repository.get_sublist(sublist.id) is None
    print("✓ Purge removes expired tasks and their sub-lists")


def test_restore_works_past_retention_until_purged():
    task = service.create_task("Late save")
    service.delete_task(task.id, now=datetime.now() - timedelta(days=60))

    assert service.restore_task(task.id).deleted_at is None


# --- Spaces ---


def test_create_space_validation():
    with pytest.raises(InvalidInputError):
        service.create_space("")
    with pytest.raises(InvalidInputError):
        service.create_space("deleted")
    with pytest.raises(InvalidInputError):
        service.create_space("All")


def test_find_space_by_name_is_case_insensitive():
    space = service.create_space("Work")

    assert service.find_space_by_name("work").id == space.id
    assert service.find_space_by_name("nope") is None
    with pytest.raises(InvalidInputError) as exc:
        service.find_space_by_name_or_raise("nope")
    assert "Work" in str(exc.value)


def test_resolve_scope():
    space = service.create_space("Home")

    assert service.resolve_scope(None) == SCOPE_ALL
    assert service.resolve_scope("all") == SCOPE_ALL
    assert service.resolve_scope("Deleted") == SCOPE_DELETED
    assert service.resolve_scope(space.id) == space.id
    assert service.resolve_scope(str(space.id)) == space.id
    assert service.resolve_scope("home") == space.id

    with pytest.raises(SpaceNotFoundError):
        service.resolve_scope(999)
    with pytest.raises(InvalidInputError):
        service.resolve_scope("Mars")


def test_resolve_scope_prefers_numeric_space_name():
    first = service.create_space("Home")
    year = service.create_space("2025")

    assert service.resolve_scope("2025") == year.id
    assert service.resolve_scope(str(first.id)) == first.id

    with pytest.raises(SpaceNotFoundError):
        service.resolve_scope("1999")
    print("✓ Numeric space names resolve by name before id")


def test_space_scope_lists_only_its_tasks():
    work = service.create_space("Work")
    service.create_task("Report", space_id=work.id)
    service.create_task("Groceries")

    assert [t.text for t in service.list_tasks("Work")] == ["Report"]
    assert len(service.list_tasks(SCOPE_ALL)) == 2


def test_delete_space_soft_deletes_its_tasks():
    """Deleting a space with two active tasks makes both recoverable."""
    space = service.create_space("Side Project")
    t1 = service.create_task("Design", space_id=space.id)
    t2 = service.create_task("Build", space_id=space.id)
    other = service.create_task("Unrelated")

    affected = service.delete_space(space.id)

    assert affected == 2
    assert service.get_space(space.id) is None
    for task_id in (t1.id, t2.id):
        task = service.get_task(task_id)
        assert task.deleted_at is not None
        assert classify(task.deleted_at) is LifecycleState.RECOVERABLE

    assert [t.id for t in service.list_tasks(SCOPE_ALL)] == [other.id]
    assert {t.id for t in service.list_tasks(SCOPE_DELETED)} == {t1.id, t2.id}
    with pytest.raises(SpaceNotFoundError):
        service.list_tasks(space.id)
    print("✓ Space delete cascades as soft delete")


def test_delete_space_keeps_earlier_deletion_stamps():
    space = service.create_space("Old")
    task = service.create_task("Gone already", space_id=space.id)
    first = service.delete_task(task.id, now=datetime(2025, 1, 1))

    assert service.delete_space(space.id) == 0
    assert service.get_task(task.id).deleted_at == first.deleted_at


def test_delete_missing_space_raises():
    with pytest.raises(SpaceNotFoundError):
        service.delete_space(123)


def test_assign_task_to_space():
    space = service.create_space("Errands")
    task = service.create_task("Post office")

    assert service.assign_task_to_space(task.id, space.id).space_id == space.id
    assert service.assign_task_to_space(task.id, None).space_id is None
    with pytest.raises(SpaceNotFoundError):
        service.assign_task_to_space(task.id, 999)


# --- Sub-lists ---


def test_create_sublist_defaults_and_validation():
    task = service.create_task("Trip")

    sublist = service.create_sublist(task.id)
    assert sublist.name == "New List"
    assert sublist.task_id == task.id
    assert sublist.items == []

    with pytest.raises(InvalidInputError):
        service.create_sublist(None, "Orphan")
    with pytest.raises(InvalidInputError):
        service.list_sublists(None)
    with pytest.raises(TaskNotFoundError):
        service.create_sublist(999, "Ghost")


def test_list_sublists_for_task():
    task = service.create_task("Trip")
    other = service.create_task("Other")
    packing = service.create_sublist(task.id, "Packing")
    todo = service.create_sublist(task.id, "Before leaving")
    service.create_sublist(other.id, "Unrelated")

    assert [s.id for s in service.list_sublists(task.id)] == [packing.id, todo.id]


def test_sublist_items_lifecycle():
    task = service.create_task("Trip")
    sublist = service.create_sublist(task.id, "Packing")

    sublist = service.add_sublist_item(sublist.id, "Passport", priority="high", due_time="08:00")
    sublist = service.add_sublist_item(sublist.id, "")
    passport, untitled = sublist.items

    assert passport.text == "Passport"
    assert passport.due_time == "08:00"
    assert untitled.text == "Untitled"

    sublist = service.complete_sublist_item(sublist.id, passport.id)
    assert sublist.get_item(passport.id).completed is True

    sublist = service.update_sublist_item(sublist.id, untitled.id, text="Charger", due_time="07:30")
    assert sublist.get_item(untitled.id).text == "Charger"

    sublist = service.update_sublist_item(sublist.id, untitled.id, due_time="")
    assert sublist.get_item(untitled.id).due_time is None

    with pytest.raises(InvalidInputError):
        service.update_sublist_item(sublist.id, untitled.id, text="  ")

    sublist = service.delete_sublist_item(sublist.id, untitled.id)
    assert [i.id for i in sublist.items] == [passport.id]

    with pytest.raises(SubListItemNotFoundError):
        service.delete_sublist_item(sublist.id, untitled.id)
    print("✓ Sub-list item add/complete/edit/delete")


def test_rename_and_delete_sublist():
    task = service.create_task("Trip")
    sublist = service.create_sublist(task.id, "Packing")
    service.add_sublist_item(sublist.id, "Socks")

    assert service.rename_sublist(sublist.id, "Bag").name == "Bag"
    with pytest.raises(InvalidInputError):
        service.rename_sublist(sublist.id, " ")

    service.delete_sublist(sublist.id)
    with pytest.raises(SubListNotFoundError):
        service.get_sublist(sublist.id)
    with pytest.raises(SubListNotFoundError):
        service.delete_sublist(sublist.id)


def test_arrange_sublist_groups_by_due_time():
    task = service.create_task("Day plan")
    sublist = service.create_sublist(task.id, "Schedule")
    service.add_sublist_item(sublist.id, "Lunch", due_time="12:00")
    service.add_sublist_item(sublist.id, "Coffee", due_time="8:15")
    service.add_sublist_item(sublist.id, "Read")

    _, groups = service.arrange_sublist(sublist.id, "due")

    assert [g.label for g in groups] == ["Due by 08:15", "Due by 12:00", "No Due Time"]
    assert [[i.text for i in g.items] for g in groups] == [["Coffee"], ["Lunch"], ["Read"]]


def test_soft_deleted_task_keeps_its_sublists():
    task = service.create_task("Trip")
    sublist = service.create_sublist(task.id, "Packing")

    service.delete_task(task.id)
    service.restore_task(task.id)

    assert [s.id for s in service.list_sublists(task.id)] == [sublist.id]
