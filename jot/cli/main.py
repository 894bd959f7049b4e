"""
FILE: jot/cli/main.py
PURPOSE: Typer-based CLI for one-shot task management commands
EXPORTS:
  - app (Typer application)
  - space_app, list_app (sub-command groups)
  - console, error_console (Rich consoles)
  - print_plain(text) - Print JSON / raw output untouched by Rich markup
  - main() (entry point)
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - jot.logging_setup (log configuration)
  - jot.repl (interactive mode)
NOTES:
  - All listing commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Commands live in jot/cli/commands/ and register themselves on import
"""

import sys

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console
from rich.markup import escape

from ..logging_setup import setup_logging

# Typer app setup
app = typer.Typer(
    name="jot",
    help="Terminal task list with spaces, checklists and a 30-day trash",
    add_completion=False,
)

# Space sub-command group
space_app = typer.Typer(
    name="space",
    help="Space management commands",
)
app.add_typer(space_app, name="space")

# Sub-list (checklist) sub-command group
list_app = typer.Typer(
    name="list",
    help="Checklists attached to a task",
)
app.add_typer(list_app, name="list")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)

# Version
__version__ = "0.1.0"


def print_plain(text: str) -> None:
    """Print machine-readable output (JSON, raw lines) without markup or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
):
    """
    Default callback - configures logging, launches REPL when no command is given.

    If a subcommand is invoked, this only sets up logging.
    If no subcommand is invoked (just 'jot'), launch the REPL.
    """
    setup_logging("DEBUG" if verbose else None)

    if ctx.invoked_subcommand is None:
        # No command specified, launch REPL
        from ..repl import main as repl_main
        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {escape(str(e))}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402,F401
    # System commands
    version,
    help,
    repl,
    # Task commands
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
    # Space commands
    space_add,
    space_ls,
    space_rm,
    # Sub-list commands
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


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
