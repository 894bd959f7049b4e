"""
FILE: jot/repl/commands/system.py
PURPOSE: System command handlers for REPL (sort, help, clear)
"""

from rich.markup import escape
from rich.panel import Panel

from ..main import console, repl_context
from ..parser import ParseResult
from ...core.constants import VALID_SORT_KEYS
from ...core.exceptions import InvalidInputError


def handle_sort_command(result: ParseResult) -> None:
    """
    Handle 'sort' command - set how the task view is ordered.

    Usage:
        sort                # Show current sort key
        sort priority       # Priority first, then due date, then age
        sort due            # Group by due date (default)
        sort created        # Oldest first
    """
    if not result.args:
        console.print(f"Sorted by: [yellow]{repl_context.view.sort_key}[/yellow]")
        console.print(f"[dim]Available: {', '.join(VALID_SORT_KEYS)}[/dim]")
        return

    try:
        repl_context.view = repl_context.view.with_sort(result.args[0])
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    console.print(f"✓ Sorting by [yellow]{repl_context.view.sort_key}[/yellow]")


def handle_help_command(result: ParseResult) -> None:
    """
    Handle 'help' command - show available commands.

    Args:
        result: Parsed command (unused)
    """
    help_text = """
[bold cyan]Tasks:[/bold cyan]

  [cyan]add <text>[/cyan] [dim]--priority P --due DATE --space NAME[/dim]   Create a task
  [cyan]ls[/cyan] [dim]--sort KEY[/dim]                   Show the current view
  [cyan]show <id>[/cyan]                       Full details and checklists
  [cyan]expand <id>[/cyan]                     Expand / collapse a task in the view
  [cyan]bulk[/cyan]                            Toggle bulk edit (expands every task)
  [cyan]done <id>,<id>...[/cyan]               Mark task(s) as complete
  [cyan]undone <id>,<id>...[/cyan]             Reopen task(s)
  [cyan]edit <id>[/cyan]                       Enter edit mode for a task
  [cyan]edit <id> "text"[/cyan] [dim]--priority P --due DATE[/dim]   Save changes (collapses it)
  [cyan]edit <id> --cancel[/cyan]              Leave edit mode
  [cyan]rm <id>,<id>...[/cyan]                 Delete task(s), restorable for 30 days
  [cyan]restore <id>,<id>...[/cyan]            Bring deleted task(s) back
  [cyan]purge[/cyan]                           Remove tasks deleted over 30 days ago
  [cyan]assign <id> <space|none>[/cyan]        File task(s) under a space

[bold cyan]View:[/bold cyan]

  [cyan]use <space|deleted|all>[/cyan]         Switch scope
  [cyan]sort <due|priority|created>[/cyan]     Change ordering

[bold cyan]Spaces:[/bold cyan]

  [cyan]space add <name>[/cyan]                Create a space
  [cyan]space ls[/cyan]                        List spaces
  [cyan]space rm <id|name>[/cyan]              Delete a space (its tasks go to deleted)

[bold cyan]Checklists:[/bold cyan]

  [cyan]list add <task_id> <name>[/cyan]       Attach a checklist to a task
  [cyan]list ls <task_id>[/cyan]               A task's checklists
  [cyan]list show <list_id>[/cyan]             Items grouped by due time
  [cyan]list rename <list_id> <name>[/cyan]    Rename
  [cyan]list rm <list_id>[/cyan]               Delete a checklist
  [cyan]list item add <list_id> <text>[/cyan] [dim]--due HH:MM[/dim]
  [cyan]list item done|undone|rm <list_id> <item_id>[/cyan]
  [cyan]list item edit <list_id> <item_id> "text"[/cyan] [dim]--priority P --due HH:MM[/dim]

[bold cyan]Other:[/bold cyan]

  [cyan]help[/cyan]                            Show this help
  [cyan]clear[/cyan]                           Clear the screen
  [cyan]exit[/cyan] or [cyan]quit[/cyan]                    Exit (the view is saved)
"""
    console.print(Panel(help_text, title="jot Help", border_style="cyan"))


def handle_clear_command(result: ParseResult) -> None:
    """
    Clear the screen.

    Args:
        result: Parsed command (no arguments used)
    """
    console.clear()
    console.print("[dim]Screen cleared[/dim]")
