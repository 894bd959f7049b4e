"""
FILE: jot/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    ls,
    show,
    done,
    reopen,
    edit,
    rm,
    restore,
    purge,
    assign,
)
from .spaces import (
    space_add,
    space_ls,
    space_rm,
)
from .sublists import (
    list_add,
    list_ls,
    list_show,
    list_rm,
    list_rename,
    item_add,
    item_done,
    item_edit,
    item_rm,
)
from .system import (
    version,
    help,
    repl,
)

__all__ = [
    "add",
    "ls",
    "show",
    "done",
    "reopen",
    "edit",
    "rm",
    "restore",
    "purge",
    "assign",
    "space_add",
    "space_ls",
    "space_rm",
    "list_add",
    "list_ls",
    "list_show",
    "list_rm",
    "list_rename",
    "item_add",
    "item_done",
    "item_edit",
    "item_rm",
    "version",
    "help",
    "repl",
]
