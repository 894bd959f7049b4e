"""
FILE: jot/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - JotError (base exception)
  - NotFoundError (base for missing records)
  - TaskNotFoundError
  - SpaceNotFoundError
  - SubListNotFoundError
  - SubListItemNotFoundError
  - InvalidInputError
  - MalformedInputError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from JotError for easy catching
  - Exceptions include context (IDs, values) for helpful error messages
  - Service layer raises these, UI layers catch and display
  - MalformedInputError is raised by due-value parsers; the sort engine
    absorbs it and treats the value as missing
"""


class JotError(Exception):
    """Base exception for all jot errors."""
    pass


class NotFoundError(JotError):
    """A referenced record doesn't exist."""
    pass


class TaskNotFoundError(NotFoundError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class SpaceNotFoundError(NotFoundError):
    """Space with given ID doesn't exist."""

    def __init__(self, space_id: int):
        self.space_id = space_id
        super().__init__(f"Space {space_id} not found")


class SubListNotFoundError(NotFoundError):
    """Sub-list with given ID doesn't exist."""

    def __init__(self, sublist_id: int):
        self.sublist_id = sublist_id
        super().__init__(f"Sub-list {sublist_id} not found")


class SubListItemNotFoundError(NotFoundError):
    """Item with given ID doesn't exist in its sub-list."""

    def __init__(self, sublist_id: int, item_id: int):
        self.sublist_id = sublist_id
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found in sub-list {sublist_id}")


class InvalidInputError(JotError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class MalformedInputError(InvalidInputError):
    """A due date or due time string could not be parsed."""

    def __init__(self, value: str, expected: str):
        self.value = value
        super().__init__(f"Malformed value '{value}', expected {expected}")
