"""
Tests for the sort/group engine (jot.core.arrange).

Covers:
- Completed items sinking to the bottom under every sort key
- Due-date ordering with missing values last and priority tiebreaks
- Grouping by calendar day (tasks) and by clock time (sub-list items)
- Malformed due values, unknown sort keys, empty input
"""

import pytest

from jot.core.arrange import Group, arrange, normalize_sort_key, sort_items, ITEM_DUE, TASK_DUE
from jot.core.constants import NO_DUE_DATE_LABEL, NO_DUE_TIME_LABEL, VALID_SORT_KEYS
from jot.core.dates import parse_due_time, format_minutes
from jot.core.exceptions import InvalidInputError, MalformedInputError
from jot.core.models import Task, SubListItem


def make_task(task_id, text=None, due=None, priority="none", completed=False, created=None):
    return Task(
        id=task_id,
        text=text or f"Task {task_id}",
        completed=completed,
        priority=priority,
        due_date=due,
        created_at=created or f"2025-01-01T00:00:{task_id:02d}",
    )


def make_item(item_id, text=None, due=None, priority="none", completed=False):
    return SubListItem(
        id=item_id,
        text=text or f"Item {item_id}",
        completed=completed,
        priority=priority,
        due_time=due,
        created_at=f"2025-01-01T00:00:{item_id:02d}",
    )


def texts(groups):
    return [[item.text for item in group.items] for group in groups]


# --- Scenario from the product brief ---


def test_same_day_tasks_order_by_priority_then_no_due_group_last():
    """A (none) and B (high) due the same day, C without due date."""
    tasks = [
        make_task(1, "A", due="2025-03-01", priority="none"),
        make_task(2, "B", due="2025-03-01", priority="high"),
        make_task(3, "C", due=None),
    ]

    groups = arrange(tasks, "due", TASK_DUE)

    assert [g.label for g in groups] == ["2025-03-01", NO_DUE_DATE_LABEL]
    assert texts(groups) == [["B", "A"], ["C"]]
    print("✓ Same-day tasks ordered by priority, no-due group last")


# --- Completion partition ---


@pytest.mark.parametrize("sort_key", VALID_SORT_KEYS)
def test_completed_items_come_after_incomplete_ones(sort_key):
    """Within every group, no completed item precedes an incomplete one."""
    tasks = [
        make_task(1, due="2025-03-01", completed=True, priority="high"),
        make_task(2, due="2025-03-01"),
        make_task(3, completed=True),
        make_task(4),
        make_task(5, due="2025-03-02", completed=True),
        make_task(6, due="2025-03-02", priority="priority"),
    ]

    for group in arrange(tasks, sort_key, TASK_DUE):
        flags = [t.completed for t in group.items]
        assert flags == sorted(flags), f"{sort_key}: {flags}"
    print(f"✓ Completed tasks sink under '{sort_key}'")


def test_completed_partition_holds_for_flat_sort():
    tasks = [make_task(1, completed=True, due="2025-01-01"), make_task(2, due="2030-01-01")]

    ordered = sort_items(tasks, "due", TASK_DUE)

    assert [t.id for t in ordered] == [2, 1]
    print("✓ sort_items puts incomplete first even with a later due date")


# --- Due ordering ---


def test_due_sort_is_ascending_with_missing_last():
    tasks = [
        make_task(1, due=None),
        make_task(2, due="2025-03-05T18:00:00"),
        make_task(3, due="2025-03-05T09:00:00"),
        make_task(4, due="2025-02-01"),
    ]

    ordered = sort_items(tasks, "due", TASK_DUE)

    assert [t.id for t in ordered] == [4, 3, 2, 1]
    print("✓ Due values ascend, missing due sorts last")


def test_priority_breaks_ties_when_both_lack_due():
    tasks = [
        make_task(1, priority="none"),
        make_task(2, priority="priority"),
        make_task(3, priority="high"),
    ]

    groups = arrange(tasks, "due", TASK_DUE)

    assert [g.label for g in groups] == [NO_DUE_DATE_LABEL]
    assert [t.id for t in groups[0].items] == [3, 2, 1]
    print("✓ Priority tiebreak applies inside the no-due group")


def test_creation_time_breaks_remaining_ties():
    tasks = [
        make_task(1, due="2025-03-01", created="2025-01-02T00:00:00"),
        make_task(2, due="2025-03-01", created="2025-01-01T00:00:00"),
    ]

    assert [t.id for t in sort_items(tasks, "due", TASK_DUE)] == [2, 1]
    print("✓ Oldest task first when due and priority tie")


def test_priority_sort_uses_due_then_created():
    tasks = [
        make_task(1, priority="priority", due=None),
        make_task(2, priority="priority", due="2025-03-01"),
        make_task(3, priority="high", due="2025-04-01"),
        make_task(4, priority="none", due="2025-01-01"),
    ]

    groups = arrange(tasks, "priority", TASK_DUE)

    assert len(groups) == 1
    assert groups[0].label is None
    assert [t.id for t in groups[0].items] == [3, 2, 1, 4]
    print("✓ Priority sort: rank, then due, then created")


def test_created_sort_ignores_priority_and_due():
    tasks = [
        make_task(1, priority="high", due="2025-01-01", created="2025-01-03T00:00:00"),
        make_task(2, created="2025-01-01T00:00:00"),
        make_task(3, created="2025-01-02T00:00:00"),
    ]

    groups = arrange(tasks, "created", TASK_DUE)

    assert [t.id for t in groups[0].items] == [2, 3, 1]
    print("✓ Created sort orders by creation time only")


def test_unknown_priority_ranks_as_none():
    tasks = [make_task(1, priority="urgent"), make_task(2, priority="priority")]

    assert [t.id for t in sort_items(tasks, "priority", TASK_DUE)] == [2, 1]


# --- Grouping ---


def test_group_count_is_distinct_days_plus_missing():
    tasks = [
        make_task(1, due="2025-03-02T23:00:00"),
        make_task(2, due="2025-03-02T01:00:00"),
        make_task(3, due="2025-03-01"),
        make_task(4, due="2025-03-09"),
        make_task(5),
    ]

    groups = arrange(tasks, "due", TASK_DUE)

    assert [g.label for g in groups] == ["2025-03-01", "2025-03-02", "2025-03-09", NO_DUE_DATE_LABEL]
    assert [t.id for t in groups[1].items] == [2, 1]
    print("✓ One group per calendar day plus the no-due group")


def test_no_missing_group_when_everything_has_a_due_date():
    tasks = [make_task(1, due="2025-03-01"), make_task(2, due="2025-03-01")]

    groups = arrange(tasks, "due", TASK_DUE)

    assert [g.label for g in groups] == ["2025-03-01"]


def test_malformed_due_date_is_treated_as_missing():
    tasks = [make_task(1, due="next tuesday"), make_task(2, due="2025-03-01")]

    groups = arrange(tasks, "due", TASK_DUE)

    assert [g.label for g in groups] == ["2025-03-01", NO_DUE_DATE_LABEL]
    assert groups[1].items[0].id == 1
    print("✓ Unparseable due date lands in 'No Due Date'")


def test_empty_input_yields_no_groups():
    for key in VALID_SORT_KEYS:
        assert arrange([], key, TASK_DUE) == []
    print("✓ Empty input gives zero groups")


def test_arrange_accepts_aliases():
    tasks = [make_task(1, due="2025-03-01")]

    assert arrange(tasks, "dueDate", TASK_DUE) == [Group("2025-03-01", tasks)]
    assert arrange(tasks, "createdAt", TASK_DUE) == [Group(None, tasks)]


def test_unknown_sort_key_is_rejected():
    with pytest.raises(InvalidInputError):
        arrange([make_task(1)], "alphabetical", TASK_DUE)


def test_normalize_sort_key():
    assert normalize_sort_key(None) == "due"
    assert normalize_sort_key(" Due_Time ") == "due"
    assert normalize_sort_key("PRIORITY") == "priority"
    assert normalize_sort_key("created_at") == "created"


# --- Sub-list items (clock times) ---


def test_items_group_by_due_time():
    items = [
        make_item(1, "Late", due="17:30"),
        make_item(2, "Early", due="9:05"),
        make_item(3, "Whenever"),
        make_item(4, "Also early", due="09:05", priority="high"),
    ]

    groups = arrange(items, "due", ITEM_DUE)

    assert [g.label for g in groups] == ["Due by 09:05", "Due by 17:30", NO_DUE_TIME_LABEL]
    assert texts(groups) == [["Also early", "Early"], ["Late"], ["Whenever"]]
    print("✓ Items grouped by clock time, single-digit hours normalized")


def test_midnight_is_a_real_due_time():
    items = [make_item(1, due=None), make_item(2, due="00:00")]

    groups = arrange(items, "due", ITEM_DUE)

    assert [g.label for g in groups] == ["Due by 00:00", NO_DUE_TIME_LABEL]


def test_malformed_due_time_is_treated_as_missing():
    items = [make_item(1, due="25:00"), make_item(2, due="noon"), make_item(3, due="08:00")]

    groups = arrange(items, "due", ITEM_DUE)

    assert [g.label for g in groups] == ["Due by 08:00", NO_DUE_TIME_LABEL]
    assert [i.id for i in groups[1].items] == [1, 2]


def test_parse_due_time():
    assert parse_due_time("00:00") == 0
    assert parse_due_time("9:30") == 570
    assert parse_due_time(" 23:59 ") == 1439
    assert format_minutes(570) == "09:30"

    for bad in ("24:00", "12:60", "1230", "", "ab:cd"):
        with pytest.raises(MalformedInputError):
            parse_due_time(bad)
    print("✓ Clock time parsing")
