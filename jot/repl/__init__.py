"""
FILE: jot/repl/__init__.py
PURPOSE: REPL package for interactive task management
EXPORTS:
  - main() (from repl.main)
DEPENDENCIES:
  - prompt_toolkit (REPL interface)
  - rich (formatted output)
  - jot.core.service (business logic)
NOTES:
  - Entry point for interactive mode
  - Provides autocomplete, command history and a saved view
"""

from .main import main

__all__ = ["main"]
