"""
FILE: jot/cli/commands/spaces.py
PURPOSE: Space commands (space_add, space_ls, space_rm)
"""

import json

import typer
from rich.markup import escape
from rich.table import Table

from ..main import console, error_console, print_plain, space_app
from ...core import service
from ...core.exceptions import (
    JotError,
    InvalidInputError,
)


@space_app.command("add")
def space_add(
    name: str = typer.Argument(..., help="Space name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new space.

    Example:
        jot space add "Work"
        jot space add "Personal" --json
    """
    try:
        space = service.create_space(name)

        if json_output:
            print_plain(space.to_json())
        elif raw:
            print_plain(f"{space.id}: {space.name}")
        else:
            console.print(f"[green]✓[/green] Created space {space.id}: {escape(space.name)}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except JotError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@space_app.command("ls")
def space_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List all spaces.

    Example:
        jot space ls
        jot space ls --json
    """
    try:
        spaces = service.list_spaces()

        if json_output:
            print_plain(json.dumps([s.to_dict() for s in spaces], indent=2))

        elif raw:
            for space in spaces:
                print_plain(f"{space.id}: {space.name}")

        else:
            if not spaces:
                console.print("[dim]No spaces found[/dim]")
                return

            # Open task count per space
            counts = {}
            for task in service.list_tasks():
                if task.space_id is not None:
                    counts[task.space_id] = counts.get(task.space_id, 0) + 1

            table = Table(title="Spaces")
            table.add_column("ID", style="cyan", no_wrap=True)
            table.add_column("Name", style="white")
            table.add_column("Tasks", style="magenta")
            table.add_column("Created", style="dim")

            for space in spaces:
                created_display = space.created_at.split("T")[0] if space.created_at else ""
                table.add_row(
                    str(space.id),
                    escape(space.name),
                    str(counts.get(space.id, 0)),
                    created_display,
                )

            console.print(table)
            console.print(f"\n[dim]Total: {len(spaces)} space(s)[/dim]")

    except JotError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@space_app.command("rm")
def space_rm(
    space_ref: str = typer.Argument(..., help="Space ID or name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a space.

    Its tasks are moved to the deleted list, where they stay restorable
    for 30 days.

    Example:
        jot space rm 2
        jot space rm Work --yes
    """
    try:
        if space_ref.strip().isdigit():
            space = service.get_space(int(space_ref))
            if not space:
                error_console.print(f"[red]Error:[/red] Space {escape(space_ref)} not found")
                raise typer.Exit(1)
        else:
            space = service.find_space_by_name_or_raise(space_ref)

        if not yes and not json_output and not raw:
            open_tasks = service.list_tasks(space.id)
            if open_tasks:
                console.print(
                    f"[yellow]Deleting '{escape(space.name)}' moves {len(open_tasks)} task(s) to the deleted list[/yellow]"
                )
                if not typer.confirm("Continue?", default=False):
                    console.print("[yellow]Cancelled[/yellow]")
                    raise typer.Exit(0)

        affected = service.delete_space(space.id)

        if json_output:
            print_plain(json.dumps({"id": space.id, "name": space.name, "deleted_tasks": affected}, indent=2))
        elif raw:
            print_plain(f"Deleted space {space.id}: {space.name} ({affected} task(s) deleted)")
        else:
            console.print(f"[red]✗[/red] Deleted space {space.id}: {escape(space.name)}")
            if affected:
                console.print(f"[dim]{affected} task(s) moved to the deleted list (jot ls --deleted)[/dim]")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except JotError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
