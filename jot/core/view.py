"""
FILE: jot/core/view.py
PURPOSE: Serializable view state (scope, sort key, expanded/editing tasks)
EXPORTS:
  - ViewState (frozen dataclass)
  - load_view_state(path) -> ViewState
  - save_view_state(state, path) -> None
DEPENDENCIES:
  - dataclasses, json, pathlib (stdlib)
  - jot.core.arrange (normalize_sort_key)
  - jot.core.constants (defaults)
NOTES:
  - Every operation returns a new ViewState; nothing mutates in place
  - Outside bulk edit only one task is expanded at a time
  - Changing scope resets expansion, editing and bulk edit
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Union

from .arrange import normalize_sort_key
from .constants import DEFAULT_SORT_KEY, SCOPE_ALL
from .exceptions import InvalidInputError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    """How the task list is currently presented."""

    expanded_ids: FrozenSet[int] = field(default_factory=frozenset)
    editing_ids: FrozenSet[int] = field(default_factory=frozenset)
    sort_key: str = DEFAULT_SORT_KEY
    scope: Union[str, int] = SCOPE_ALL
    bulk_edit: bool = False

    def is_expanded(self, task_id: int) -> bool:
        return task_id in self.expanded_ids

    def is_editing(self, task_id: int) -> bool:
        return task_id in self.editing_ids

    def toggle_expanded(self, task_id: int) -> "ViewState":
        """
        Expand or collapse a task.

        Outside bulk edit, expanding a task collapses every other one.
        In bulk edit, tasks toggle independently.
        """
        if self.bulk_edit:
            return replace(self, expanded_ids=self.expanded_ids ^ {task_id})

        if task_id in self.expanded_ids:
            return replace(self, expanded_ids=frozenset())
        return replace(self, expanded_ids=frozenset({task_id}))

    def toggle_bulk_edit(self, all_ids: Iterable[int]) -> "ViewState":
        """Entering bulk edit expands every task; leaving it collapses all."""
        entering = not self.bulk_edit
        expanded = frozenset(all_ids) if entering else frozenset()
        return replace(self, bulk_edit=entering, expanded_ids=expanded)

    def start_editing(self, task_id: int) -> "ViewState":
        return replace(self, editing_ids=self.editing_ids | {task_id})

    def stop_editing(self, task_id: int) -> "ViewState":
        """Leave edit mode for a task and collapse it."""
        return replace(
            self,
            editing_ids=self.editing_ids - {task_id},
            expanded_ids=self.expanded_ids - {task_id},
        )

    def with_sort(self, sort_key: str) -> "ViewState":
        """
        Raises:
            InvalidInputError: If sort_key is unknown
        """
        return replace(self, sort_key=normalize_sort_key(sort_key))

    def with_scope(self, scope: Union[str, int]) -> "ViewState":
        return replace(
            self,
            scope=scope,
            expanded_ids=frozenset(),
            editing_ids=frozenset(),
            bulk_edit=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expanded_ids": sorted(self.expanded_ids),
            "editing_ids": sorted(self.editing_ids),
            "sort_key": self.sort_key,
            "scope": self.scope,
            "bulk_edit": self.bulk_edit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewState":
        """Rebuild a ViewState, falling back to defaults for unusable fields."""
        try:
            sort_key = normalize_sort_key(data.get("sort_key"))
        except InvalidInputError:
            sort_key = DEFAULT_SORT_KEY

        scope = data.get("scope", SCOPE_ALL)
        if not isinstance(scope, (str, int)) or isinstance(scope, bool):
            scope = SCOPE_ALL

        return cls(
            expanded_ids=frozenset(int(i) for i in data.get("expanded_ids", [])),
            editing_ids=frozenset(int(i) for i in data.get("editing_ids", [])),
            sort_key=sort_key,
            scope=scope,
            bulk_edit=bool(data.get("bulk_edit", False)),
        )


def load_view_state(path: Path) -> ViewState:
    """
    Load view state saved by a previous session.

    Returns a default ViewState if the file is missing or unreadable.
    """
    if not path.exists():
        return ViewState()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ViewState.from_dict(data)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable view state at %s: %s", path, e)
        return ViewState()


def save_view_state(state: ViewState, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
