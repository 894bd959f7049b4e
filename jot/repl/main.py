"""
FILE: jot/repl/main.py
PURPOSE: Interactive jot session on top of prompt_toolkit
EXPORTS:
  - console (Rich console shared by handlers)
  - REPLContext, repl_context (session view state)
  - execute_command(result) -> bool
  - run_repl() - read / dispatch loop
  - main() - entry point used by `jot` and `jot repl`
DEPENDENCIES:
  - prompt_toolkit (prompt session, file history, completion)
  - rich (console output)
  - jot.core.service (business logic)
  - jot.core.view (ViewState and its persistence)
  - jot.repl.parser, jot.repl.completer
NOTES:
  - View state (scope, sort, expanded, editing, bulk edit) is loaded at
    start and saved on exit to Settings.state_path
  - Bottom toolbar shows open/done/deleted counts
  - Leave with Ctrl+D, "exit" or "quit"; Ctrl+C only drops the line
  - Handlers call the service layer, never the Typer commands
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich.console import Console
from rich.markup import escape

from ..config import get_settings
from ..core import service
from ..core.constants import DEFAULT_SORT_KEY, SCOPE_ALL, SCOPE_DELETED
from ..core.exceptions import JotError
from ..core.view import ViewState, load_view_state, save_view_state
from .parser import parse_command, ParseResult
from .completer import create_completer


logger = logging.getLogger(__name__)

console = Console()


# --- Session state ---


@dataclass
class REPLContext:
    """
    Persistent context for the REPL session.

    Attributes:
        view: Current ViewState; handlers replace it, never mutate it
        state_path: Where the view is saved between sessions (None = don't save)
    """
    view: ViewState = field(default_factory=ViewState)
    state_path: Optional[Path] = None

    def scope_label(self) -> Optional[str]:
        """Name of the current scope, or None for ALL."""
        scope = self.view.scope
        if scope == SCOPE_ALL:
            return None
        if scope == SCOPE_DELETED:
            return "deleted"
        try:
            space = service.get_space(int(scope))
        except (JotError, ValueError):
            space = None
        return space.name if space else f"#{scope}"

    def get_prompt(self) -> str:
        """
        Generate prompt string based on current view.

        Returns:
            Prompt like "jot> ", "jot:[Work]> " or "jot:[Work | priority]> "
        """
        parts = []

        label = self.scope_label()
        if label:
            parts.append(label)

        if self.view.sort_key != DEFAULT_SORT_KEY:
            parts.append(self.view.sort_key)

        if self.view.bulk_edit:
            parts.append("bulk")

        if parts:
            return f"jot:[{' | '.join(parts)}]> "

        return "jot> "

    def load(self) -> None:
        if self.state_path is not None:
            self.view = load_view_state(self.state_path)

    def save(self) -> None:
        if self.state_path is not None:
            save_view_state(self.view, self.state_path)


# Global REPL context (persists during session, saved on exit)
repl_context = REPLContext()


def format_prompt() -> HTML:
    """
    Create formatted prompt text with context and colors.

    Returns:
        HTML prompt with magenta scope, yellow sort key and red bulk marker
    """
    parts = []
    values = []

    label = repl_context.scope_label()
    if label:
        parts.append("<magenta>{}</magenta>")
        values.append(label)

    if repl_context.view.sort_key != DEFAULT_SORT_KEY:
        parts.append("<ansiyellow>{}</ansiyellow>")
        values.append(repl_context.view.sort_key)

    if repl_context.view.bulk_edit:
        parts.append("<ansired>bulk</ansired>")

    if parts:
        return HTML(f"<b>jot:[{' | '.join(parts)}]&gt; </b>").format(*values)

    return HTML("<b>jot&gt; </b>")


def get_bottom_toolbar() -> HTML:
    """
    Create bottom toolbar showing task counts.

    Returns:
        HTML formatted toolbar with open / done / deleted counts
    """
    try:
        tasks = service.list_tasks(SCOPE_ALL)
        deleted = service.list_tasks(SCOPE_DELETED)
        open_count = sum(1 for t in tasks if not t.completed)
        done_count = len(tasks) - open_count

        text = f"{open_count} open | {done_count} done | {len(deleted)} deleted | 'help' for commands"
        return HTML(f"<style bg='#444444' fg='#ffffff'> {text} </style>")
    except JotError as e:
        logger.debug("Toolbar counts unavailable: %s", e)
        return HTML("<style bg='#444444' fg='#ffffff'> jot </style>")


from .commands import (  # noqa: E402
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
    handle_use_command,
    handle_space_command,
    handle_list_command,
    handle_sort_command,
    handle_help_command,
    handle_clear_command,
)


HANDLERS = {
    "add": handle_add_command,
    "ls": handle_ls_command,
    "show": handle_show_command,
    "expand": handle_expand_command,
    "bulk": handle_bulk_command,
    "done": handle_done_command,
    "undone": handle_undone_command,
    "edit": handle_edit_command,
    "rm": handle_rm_command,
    "restore": handle_restore_command,
    "purge": handle_purge_command,
    "assign": handle_assign_command,
    "sort": handle_sort_command,
    "use": handle_use_command,
    "space": handle_space_command,
    "list": handle_list_command,
    "help": handle_help_command,
    "clear": handle_clear_command,
}

EXIT_COMMANDS = ("exit", "quit")


def execute_command(result: ParseResult) -> bool:
    """
    Run one parsed line.

    Returns:
        False when the session should end, True otherwise
    """
    command = result.command.lower()

    if command in EXIT_COMMANDS:
        console.print("[dim]Bye.[/dim]")
        return False

    if not command:
        return True

    handler = HANDLERS.get(command)
    if handler is None:
        console.print(f"[red]Unknown command:[/red] {escape(command)} [dim](see 'help')[/dim]")
    else:
        handler(result)
    console.print()

    return True


def _create_session() -> PromptSession:
    settings = get_settings()
    try:
        settings.home_dir.mkdir(parents=True, exist_ok=True)
        history = FileHistory(str(settings.home_dir / "history"))
    except OSError as e:
        logger.warning("History file unavailable, keeping it in memory: %s", e)
        history = InMemoryHistory()

    return PromptSession(
        history=history,
        completer=create_completer(),
        complete_while_typing=True,
        bottom_toolbar=get_bottom_toolbar,
    )


def _make_reader() -> Callable[[], str]:
    """
    Pick how lines are read.

    A prompt_toolkit session when both ends are a terminal, plain input()
    otherwise (pipes, tests, or a session that failed to start).
    """
    if sys.stdin.isatty() and sys.stdout.isatty():
        try:
            session = _create_session()
            return lambda: session.prompt(format_prompt)
        except Exception as e:
            logger.warning("prompt_toolkit unavailable, using plain input: %s", e)

    console.print("[dim](plain input mode, no completion)[/dim]")
    return lambda: input(repl_context.get_prompt())


def run_repl() -> None:
    """
    Read and dispatch lines until exit/quit or Ctrl+D.

    The view is restored from the previous session first and saved back
    however the loop ends.
    """
    repl_context.state_path = get_settings().state_path
    repl_context.load()

    read_line = _make_reader()
    console.print("[bold cyan]jot[/bold cyan] [dim]'help' lists commands, 'exit' leaves[/dim]\n")

    try:
        while True:
            try:
                if not execute_command(parse_command(read_line())):
                    break
            except KeyboardInterrupt:
                console.print("[dim]Line dropped. Ctrl+D or 'exit' to leave.[/dim]")
            except EOFError:
                console.print("\n[dim]Bye.[/dim]")
                break
            except JotError as e:
                console.print(f"[red]Error:[/red] {escape(str(e))}")
            except Exception as e:
                logger.exception("Command crashed")
                console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
    finally:
        repl_context.save()


def main() -> None:
    """Start an interactive session (`jot` or `jot repl`)."""
    try:
        run_repl()
    except Exception as e:
        console.print(f"[red]Fatal error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
