"""
FILE: jot/cli/commands/system.py
PURPOSE: System commands (version, help, repl)
"""

import typer
from rich.markup import escape

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, error_console, __version__


@app.command()
def version():
    """Show jot version."""
    console.print(f"jot v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]jot[/bold cyan] - Terminal task list with spaces and checklists\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  jot \\[command] \\[options]")
    console.print("  jot                       [dim]# Launch interactive REPL (default)[/dim]\n")

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("add", "Create a new task", 'jot add "Task" [--space NAME] [--priority high] [--due DATE]'),
        ("ls", "List tasks grouped by due date", "jot ls [--space NAME] [--sort due|priority|created] [--deleted]"),
        ("show", "View task details and lists", "jot show <task_id>"),
        ("done", "Mark task(s) as complete", "jot done <task_id(s)>"),
        ("reopen", "Mark task(s) as not done", "jot reopen <task_id(s)>"),
        ("edit", "Update a task", 'jot edit <task_id> "New text" [--priority P] [--due DATE]'),
        ("rm", "Delete task(s) (restorable for 30 days)", "jot rm <task_id(s)>"),
        ("restore", "Bring deleted task(s) back", "jot restore <task_id(s)>"),
        ("purge", "Remove tasks deleted 30+ days ago", "jot purge [--dry-run] [--yes]"),
        ("assign", "File task(s) under a space", "jot assign <task_id(s)> <space|none>"),
        ("space add", "Create a space", 'jot space add "Name"'),
        ("space ls", "List spaces", "jot space ls"),
        ("space rm", "Delete a space", "jot space rm <id|name>"),
        ("list add", "Attach a checklist to a task", 'jot list add <task_id> ["Name"]'),
        ("list show", "Show a checklist", "jot list show <list_id> [--sort KEY]"),
        ("list item-add", "Add a checklist item", 'jot list item-add <list_id> "Text" [--due HH:MM]'),
        ("repl", "Launch interactive REPL", "jot repl"),
        ("version", "Show version", "jot version"),
        ("help", "Show this help message", "jot help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:13}[/green] {desc}")
        console.print(f"                [dim]{escape(example)}[/dim]\n")

    console.print("[bold]Global Options:[/bold]")
    console.print("  [yellow]--json[/yellow]    Output as JSON (for scripting)")
    console.print("  [yellow]--raw[/yellow]     Plain text output (no colors)")
    console.print("  [yellow]--verbose[/yellow] Debug logging on stderr (before the command)")
    console.print("  [yellow]--help[/yellow]    Show detailed help for a command\n")


@app.command()
def repl():
    """
    Launch interactive REPL mode.

    The REPL provides:
    - Command history (up/down arrows)
    - Autocomplete (Tab key)
    - Expand / bulk edit views that persist between sessions
    - Exit with Ctrl+D or type 'exit'

    Example:
        jot repl
    """
    # Import here to avoid loading REPL dependencies for one-shot commands
    from ...repl import main as repl_main

    try:
        repl_main()
    except Exception as e:
        error_console.print(f"[red]Error starting REPL:[/red] {escape(str(e))}")
        raise typer.Exit(1)
