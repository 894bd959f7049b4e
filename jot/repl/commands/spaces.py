"""
FILE: jot/repl/commands/spaces.py
PURPOSE: Space and scope command handlers for REPL
"""

from rich.markup import escape
from rich.table import Table

from ..main import console, repl_context
from ..parser import ParseResult
from ...core import service
from ...core.constants import SCOPE_ALL, SCOPE_DELETED
from ...core.exceptions import (
    JotError,
    InvalidInputError,
)
from .tasks import ask_confirmation


CLEAR_SCOPE_WORDS = ("all", "none", "clear", ".")


def handle_space_add_command(result: ParseResult) -> None:
    """
    Handle 'space add' command - create new space.

    Usage:
        space add Work
        space add "Side Project"
    """
    if not result.args:
        console.print("[red]Error:[/red] Space name required")
        console.print("[dim]Usage: space add <name>[/dim]")
        return

    # Join all args as the name
    name = " ".join(result.args)

    try:
        space = service.create_space(name)
        console.print(f"[green]✓ Created space:[/green] [cyan]{space.id}[/cyan]: {escape(space.name)}")
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
    except JotError as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def handle_space_ls_command(result: ParseResult) -> None:
    """
    Handle 'space ls' command - list spaces.

    Usage:
        space ls
    """
    try:
        spaces = service.list_spaces()

        if not spaces:
            console.print("[dim]No spaces found[/dim]")
            return

        counts = {}
        for task in service.list_tasks(SCOPE_ALL):
            if task.space_id is not None:
                counts[task.space_id] = counts.get(task.space_id, 0) + 1

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6)
        table.add_column("Name", style="white")
        table.add_column("Tasks", style="magenta")
        table.add_column("", width=2)

        for space in spaces:
            current = "[green]●[/green]" if repl_context.view.scope == space.id else ""
            table.add_row(
                str(space.id),
                escape(space.name),
                str(counts.get(space.id, 0)),
                current,
            )

        console.print(table)
    except JotError as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def handle_space_rm_command(result: ParseResult) -> None:
    """
    Handle 'space rm' command - delete a space.

    Its tasks move to the deleted list. Always confirms when the space
    still has tasks.

    Usage:
        space rm 2
        space rm Work
    """
    if not result.args:
        console.print("[red]Error:[/red] Space ID or name required")
        console.print("[dim]Usage: space rm <space_id|name>[/dim]")
        return

    ref = " ".join(result.args)

    try:
        space_id = service.resolve_scope(ref)
        if space_id in (SCOPE_ALL, SCOPE_DELETED):
            console.print(f"[red]Error:[/red] '{escape(ref)}' is not a space")
            return

        space = service.get_space(space_id)
        open_tasks = service.list_tasks(space_id)
        if open_tasks and not ask_confirmation(
            f"Delete '{space.name}' and move its {len(open_tasks)} task(s) to the deleted list?"
        ):
            console.print("[yellow]Cancelled[/yellow]")
            return

        affected = service.delete_space(space_id)
        console.print(f"[red]✗[/red] Deleted space {space.id}: {escape(space.name)}")
        if affected:
            console.print(f"[dim]{affected} task(s) moved to the deleted list ('use deleted' to see them)[/dim]")

        if repl_context.view.scope == space_id:
            repl_context.view = repl_context.view.with_scope(SCOPE_ALL)

    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_space_command(result: ParseResult) -> None:
    """
    Handle 'space' command - dispatch to subcommand.

    Usage:
        space add <name>
        space ls
        space rm <id|name>
    """
    if not result.args:
        console.print("[red]Error:[/red] Space subcommand required")
        console.print("[dim]Usage: space <add|ls|rm> ...[/dim]")
        return

    sub_result = result.subcommand()

    handlers = {
        "add": handle_space_add_command,
        "ls": handle_space_ls_command,
        "rm": handle_space_rm_command,
    }

    handler = handlers.get(sub_result.command)
    if handler:
        handler(sub_result)
    else:
        console.print(f"[red]Unknown space command:[/red] {escape(sub_result.command)}")
        console.print("[dim]Available: add, ls, rm[/dim]")


# --- Context Management Commands ---


def handle_use_command(result: ParseResult) -> None:
    """
    Handle 'use' command - switch the scope of the task view.

    Switching scope collapses everything and leaves bulk edit.

    Usage:
        use                 # Show current scope
        use Work            # Only tasks in the Work space
        use deleted         # Recently deleted tasks
        use all             # Every active task
    """
    if not result.args:
        label = repl_context.scope_label()
        if label:
            console.print(f"Current scope: [magenta]{escape(label)}[/magenta]")
        else:
            console.print("[dim]Showing all tasks[/dim]")
        return

    ref = " ".join(result.args)

    if ref.lower() in CLEAR_SCOPE_WORDS:
        repl_context.view = repl_context.view.with_scope(SCOPE_ALL)
        console.print("✓ Showing all tasks")
        return

    try:
        scope = service.resolve_scope(ref)
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    repl_context.view = repl_context.view.with_scope(scope)
    console.print(f"✓ Now viewing: [magenta]{escape(repl_context.scope_label() or 'all tasks')}[/magenta]")
