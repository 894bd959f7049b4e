"""
FILE: jot/core/arrange.py
PURPOSE: Ordering and due-value grouping of tasks and sub-list items
EXPORTS:
  - Group (dataclass): one labelled run of items
  - DueField (dataclass): how an item class exposes its due value
  - TASK_DUE, ITEM_DUE: DueField for tasks (dates) and sub-list items (times)
  - normalize_sort_key(value) -> str
  - priority_rank(item) -> int
  - sort_items(items, sort_key, due) -> List
  - arrange(items, sort_key, due) -> List[Group]
DEPENDENCIES:
  - jot.core.constants (sort keys, priority ranks, labels)
  - jot.core.dates (parsers)
  - jot.core.exceptions (InvalidInputError, MalformedInputError)
NOTES:
  - Pure functions, no I/O
  - Incomplete items always come before completed ones
  - Malformed due values are treated as missing, never raised
  - Empty input yields no groups for every sort key
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from .constants import (
    PRIORITY_RANK,
    SORT_DUE,
    SORT_PRIORITY,
    SORT_KEY_ALIASES,
    VALID_SORT_KEYS,
    DEFAULT_SORT_KEY,
    NO_DUE_DATE_LABEL,
    NO_DUE_TIME_LABEL,
    DUE_TIME_LABEL_FORMAT,
)
from .dates import parse_timestamp, parse_due_time, format_minutes
from .exceptions import InvalidInputError, MalformedInputError


logger = logging.getLogger(__name__)


@dataclass
class Group:
    """A run of arranged items sharing a due bucket (label is None when ungrouped)."""

    label: Optional[str]
    items: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class DueField:
    """
    Describes where an item keeps its due value and how to bucket it.

    Attributes:
        attr: Attribute holding the raw due value
        parse: Raw string -> comparable value (raises MalformedInputError)
        bucket: Parsed value -> group key
        label: Group key -> group label
        missing_label: Label of the trailing "no due value" group
    """

    attr: str
    parse: Callable[[Any], Any]
    bucket: Callable[[Any], Any]
    label: Callable[[Any], str]
    missing_label: str

    def value_of(self, item: Any) -> Optional[Any]:
        """Parsed due value of item, or None when missing or malformed."""
        raw = getattr(item, self.attr, None)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None

        try:
            return self.parse(raw)
        except MalformedInputError as e:
            logger.debug("Treating %s of %r as missing: %s", self.attr, item, e)
            return None


TASK_DUE = DueField(
    attr="due_date",
    parse=parse_timestamp,
    bucket=lambda value: value.date(),
    label=lambda day: day.isoformat(),
    missing_label=NO_DUE_DATE_LABEL,
)

ITEM_DUE = DueField(
    attr="due_time",
    parse=parse_due_time,
    bucket=lambda minutes: minutes,
    label=lambda minutes: DUE_TIME_LABEL_FORMAT.format(time=format_minutes(minutes)),
    missing_label=NO_DUE_TIME_LABEL,
)


def normalize_sort_key(value: Optional[str]) -> str:
    """
    Map a user-supplied sort key onto one of VALID_SORT_KEYS.

    Accepts the canonical keys plus aliases such as "dueDate", "due_time"
    or "createdAt" (case-insensitive). None means the default key.

    Raises:
        InvalidInputError: If the key is unknown
    """
    if value is None:
        return DEFAULT_SORT_KEY

    key = SORT_KEY_ALIASES.get(str(value).strip().lower())
    if key is None:
        raise InvalidInputError(
            f"Invalid sort key '{value}'. Must be one of: {', '.join(VALID_SORT_KEYS)}"
        )
    return key


def priority_rank(item: Any) -> int:
    """Numeric rank of an item's priority; unknown values rank as 'none'."""
    priority = getattr(item, "priority", None)
    if not isinstance(priority, str):
        return 0
    return PRIORITY_RANK.get(priority, 0)


def _created_key(item: Any):
    raw = getattr(item, "created_at", None)
    try:
        created = parse_timestamp(raw) if raw else None
    except MalformedInputError:
        created = None
    return (created is None, created or datetime.min)


def _due_key(item: Any, due: DueField):
    value = due.value_of(item)
    # Both halves only get compared when both items have a due value
    return (value is None, value if value is not None else 0)


def _key_function(sort_key: str, due: DueField) -> Callable[[Any], tuple]:
    if sort_key == SORT_DUE:
        return lambda item: (
            bool(getattr(item, "completed", False)),
            _due_key(item, due),
            -priority_rank(item),
            _created_key(item),
        )

    if sort_key == SORT_PRIORITY:
        return lambda item: (
            bool(getattr(item, "completed", False)),
            -priority_rank(item),
            _due_key(item, due),
            _created_key(item),
        )

    return lambda item: (
        bool(getattr(item, "completed", False)),
        _created_key(item),
    )


def sort_items(
    items: Iterable[Any],
    sort_key: Optional[str] = DEFAULT_SORT_KEY,
    due: DueField = TASK_DUE,
) -> List[Any]:
    """
    Order items for display.

    Args:
        items: Tasks or sub-list items (anything with completed/priority/created_at)
        sort_key: "due", "priority" or "created" (aliases accepted)
        due: DueField matching the item class

    Returns:
        New list; incomplete items first, then completed, each partition
        ordered by the requested key

    Raises:
        InvalidInputError: If sort_key is unknown
    """
    key = normalize_sort_key(sort_key)
    return sorted(items, key=_key_function(key, due))


def _group_by_due(ordered: List[Any], due: DueField) -> List[Group]:
    buckets: Dict[Any, List[Any]] = {}
    missing: List[Any] = []

    for item in ordered:
        value = due.value_of(item)
        if value is None:
            missing.append(item)
        else:
            buckets.setdefault(due.bucket(value), []).append(item)

    groups = [Group(label=due.label(key), items=buckets[key]) for key in sorted(buckets)]
    if missing:
        groups.append(Group(label=due.missing_label, items=missing))

    return groups


def arrange(
    items: Iterable[Any],
    sort_key: Optional[str] = DEFAULT_SORT_KEY,
    due: DueField = TASK_DUE,
) -> List[Group]:
    """
    Sort items and, when sorting by due value, split them into due groups.

    Args:
        items: Tasks (with TASK_DUE) or sub-list items (with ITEM_DUE)
        sort_key: "due", "priority" or "created" (aliases accepted)
        due: DueField matching the item class

    Returns:
        Ordered groups. Under "due": one group per calendar day (tasks) or
        clock time (items), ascending, then the "No Due ..." group last.
        Under any other key: a single group with label None. Empty input
        yields an empty list.

    Raises:
        InvalidInputError: If sort_key is unknown

    Example:
        >>> [g.label for g in arrange(tasks, "due")]
        ['2025-03-01', '2025-03-04', 'No Due Date']
    """
    key = normalize_sort_key(sort_key)
    ordered = sort_items(items, key, due)

    if not ordered:
        return []

    if key != SORT_DUE:
        return [Group(label=None, items=ordered)]

    return _group_by_due(ordered, due)
