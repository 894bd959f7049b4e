"""
FILE: jot/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .tasks import (
    handle_add_command,
    handle_ls_command,
    handle_show_command,
    handle_expand_command,
    handle_bulk_command,
    handle_done_command,
    handle_undone_command,
    handle_edit_command,
    handle_rm_command,
    handle_restore_command,
    handle_purge_command,
    handle_assign_command,
)
from .spaces import (
    handle_use_command,
    handle_space_command,
)
from .lists import (
    handle_list_command,
)
from .system import (
    handle_sort_command,
    handle_help_command,
    handle_clear_command,
)

__all__ = [
    "handle_add_command",
    "handle_ls_command",
    "handle_show_command",
    "handle_expand_command",
    "handle_bulk_command",
    "handle_done_command",
    "handle_undone_command",
    "handle_edit_command",
    "handle_rm_command",
    "handle_restore_command",
    "handle_purge_command",
    "handle_assign_command",
    "handle_use_command",
    "handle_space_command",
    "handle_list_command",
    "handle_sort_command",
    "handle_help_command",
    "handle_clear_command",
]
