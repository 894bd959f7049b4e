"""
FILE: jot/core/models.py
PURPOSE: Domain models for tasks, spaces, sub-lists and sub-list items
EXPORTS:
  - Task (dataclass)
  - Space (dataclass)
  - SubList (dataclass)
  - SubListItem (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - typing (stdlib)
NOTES:
  - All models have from_row() for SQLite row conversion
  - All models have to_json() for serialization
  - Optional fields use None as default
  - Timestamps stored as ISO-8601 strings
  - SubListItem has no identity outside its SubList
"""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional
import json

from .constants import DEFAULT_PRIORITY, DEFAULT_SUBLIST_NAME


@dataclass
class Task:
    """A to-do entry, optionally filed under a space."""

    id: int
    text: str
    completed: bool = False
    space_id: Optional[int] = None
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    deleted_at: Optional[str] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    def from_row(cls, row) -> "Task":
        """Convert SQLite row to Task object."""
        return cls(
            id=row["id"],
            text=row["text"],
            completed=bool(row["completed"]),
            space_id=row["space_id"],
            priority=row["priority"] or DEFAULT_PRIORITY,
            due_date=row["due_date"],
            created_at=row["created_at"],
            deleted_at=row["deleted_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Space:
    """A named category grouping tasks."""

    id: int
    name: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Space":
        """Convert SQLite row to Space object."""
        return cls(
            id=row["id"],
            name=row["name"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize space to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class SubListItem:
    """One checklist entry inside a sub-list."""

    id: int
    text: str
    completed: bool = False
    priority: str = DEFAULT_PRIORITY
    due_time: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "SubListItem":
        """Convert SQLite row to SubListItem object."""
        return cls(
            id=row["id"],
            text=row["text"],
            completed=bool(row["completed"]),
            priority=row["priority"] or DEFAULT_PRIORITY,
            # Stored as "" by older clients
            due_time=row["due_time"] or None,
            created_at=row["created_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SubList:
    """A named checklist attached to a single task."""

    id: int
    task_id: int
    name: str = DEFAULT_SUBLIST_NAME
    items: List[SubListItem] = field(default_factory=list)

    def get_item(self, item_id: int) -> Optional[SubListItem]:
        return next((i for i in self.items if i.id == item_id), None)

    @classmethod
    def from_row(cls, row, items: Optional[List[SubListItem]] = None) -> "SubList":
        """Convert SQLite row (plus its item rows) to SubList object."""
        return cls(
            id=row["id"],
            task_id=row["task_id"],
            name=row["name"],
            items=list(items or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize sub-list (with its items) to JSON string."""
        return json.dumps(self.to_dict(), indent=2)
