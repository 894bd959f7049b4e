"""
FILE: jot/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - VALID_PRIORITIES / PRIORITY_RANK: Priority values and their sort rank
  - SORT_DUE / SORT_PRIORITY / SORT_CREATED: Canonical sort keys
  - SORT_KEY_ALIASES: Accepted spellings for each sort key
  - SCOPE_ALL / SCOPE_DELETED: Reserved scope values
  - RETENTION_DAYS: Restore window for soft-deleted tasks
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
  - Single source of truth for priority and sort values
"""

# Priority constants
PRIORITY_NONE = "none"
PRIORITY_NORMAL = "priority"
PRIORITY_HIGH = "high"
VALID_PRIORITIES = (PRIORITY_NONE, PRIORITY_NORMAL, PRIORITY_HIGH)
DEFAULT_PRIORITY = PRIORITY_NONE

# Higher rank sorts first
PRIORITY_RANK = {
    PRIORITY_HIGH: 2,
    PRIORITY_NORMAL: 1,
    PRIORITY_NONE: 0,
}

# Sort keys
SORT_DUE = "due"
SORT_PRIORITY = "priority"
SORT_CREATED = "created"
VALID_SORT_KEYS = (SORT_DUE, SORT_PRIORITY, SORT_CREATED)
DEFAULT_SORT_KEY = SORT_DUE

SORT_KEY_ALIASES = {
    "due": SORT_DUE,
    "duedate": SORT_DUE,
    "due_date": SORT_DUE,
    "duetime": SORT_DUE,
    "due_time": SORT_DUE,
    "priority": SORT_PRIORITY,
    "created": SORT_CREATED,
    "createdat": SORT_CREATED,
    "created_at": SORT_CREATED,
}

# Reserved scope values (anything else is a space)
SCOPE_ALL = "ALL"
SCOPE_DELETED = "DELETED"
RESERVED_SCOPES = (SCOPE_ALL, SCOPE_DELETED)

# Soft-delete window
RETENTION_DAYS = 30

# Group labels
NO_DUE_DATE_LABEL = "No Due Date"
NO_DUE_TIME_LABEL = "No Due Time"
DUE_TIME_LABEL_FORMAT = "Due by {time}"

# Default values
DEFAULT_SUBLIST_NAME = "New List"
DEFAULT_ITEM_TEXT = "Untitled"
