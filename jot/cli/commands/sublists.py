"""
FILE: jot/cli/commands/sublists.py
PURPOSE: Checklist commands (list add/ls/show/rm/rename, item-add/item-done/item-edit/item-rm)
NOTES:
  - Lists and items are removed for good; there is no trash for them
"""

import json
from typing import Optional

import typer
from rich.markup import escape

from ..main import console, error_console, list_app, print_plain
from ...core import service
from ...core.constants import DEFAULT_PRIORITY
from ...core.exceptions import (
    JotError,
    NotFoundError,
    InvalidInputError,
)
from ...formatting import SubListFormatter, print_item_groups


def _fail(e: JotError) -> None:
    if isinstance(e, (NotFoundError, InvalidInputError)):
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
    else:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
    raise typer.Exit(1)


@list_app.command("add")
def list_add(
    task_id: int = typer.Argument(..., help="Task the list belongs to"),
    name: Optional[str] = typer.Argument(None, help="List name (default: New List)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Attach a new checklist to a task.

    Example:
        jot list add 5 "Packing"
    """
    try:
        sublist = service.create_sublist(task_id, name)

        if json_output:
            print_plain(sublist.to_json())
        elif raw:
            print_plain(f"{sublist.id}: {sublist.name}")
        else:
            console.print(f"[green]✓[/green] Created list {sublist.id} on task {task_id}: {escape(sublist.name)}")

    except JotError as e:
        _fail(e)


@list_app.command("ls")
def list_ls(
    task_id: int = typer.Argument(..., help="Task ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List a task's checklists.

    Example:
        jot list ls 5
    """
    try:
        service.get_task(task_id)
        sublists = service.list_sublists(task_id)

        if json_output:
            print_plain(json.dumps([s.to_dict() for s in sublists], indent=2))
        elif raw:
            for sublist in sublists:
                print_plain(f"{sublist.id}: {sublist.name}")
        else:
            if not sublists:
                console.print(f"[dim]Task {task_id} has no lists[/dim]")
                return
            console.print(SubListFormatter.create_lists_table(sublists))

    except JotError as e:
        _fail(e)


@list_app.command("show")
def list_show(
    sublist_id: int = typer.Argument(..., help="List ID"),
    sort_key: Optional[str] = typer.Option(None, "--sort", help="due (default), priority or created"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show a checklist's items, grouped by due time by default.

    Example:
        jot list show 3
        jot list show 3 --sort priority
    """
    try:
        sublist, groups = service.arrange_sublist(sublist_id, sort_key)

        if json_output:
            print_plain(SubListFormatter.groups_to_json(sublist, groups))
        elif raw:
            for group in groups:
                if group.label:
                    print_plain(f"# {group.label}")
                for line in SubListFormatter.to_raw_lines(group.items):
                    print_plain(line)
        else:
            print_item_groups(console, sublist, groups)

    except JotError as e:
        _fail(e)


@list_app.command("rm")
def list_rm(
    sublist_id: int = typer.Argument(..., help="List ID"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete a checklist and all its items permanently.

    Example:
        jot list rm 3 --yes
    """
    try:
        sublist = service.get_sublist(sublist_id)

        if not yes and sublist.items:
            console.print(f"[yellow]'{escape(sublist.name)}' has {len(sublist.items)} item(s)[/yellow]")
            if not typer.confirm("Delete it permanently?", default=False):
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0)

        service.delete_sublist(sublist_id)
        console.print(f"[red]✗[/red] Deleted list {sublist.id}: {escape(sublist.name)}")

    except JotError as e:
        _fail(e)


@list_app.command("rename")
def list_rename(
    sublist_id: int = typer.Argument(..., help="List ID"),
    name: str = typer.Argument(..., help="New name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Rename a checklist.

    Example:
        jot list rename 3 "Groceries"
    """
    try:
        sublist = service.rename_sublist(sublist_id, name)

        if json_output:
            print_plain(sublist.to_json())
        else:
            console.print(f"[blue]✎[/blue] Renamed list {sublist.id}: {escape(sublist.name)}")

    except JotError as e:
        _fail(e)


@list_app.command("item-add")
def item_add(
    sublist_id: int = typer.Argument(..., help="List ID"),
    text: Optional[str] = typer.Argument(None, help="Item text (default: Untitled)"),
    priority: str = typer.Option(DEFAULT_PRIORITY, "--priority", "-p", help="none, priority or high"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due time (HH:MM)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Add an item to a checklist.

    Example:
        jot list item-add 3 "Passport" --due 08:00
    """
    try:
        sublist = service.add_sublist_item(sublist_id, text, priority=priority, due_time=due)
        item = max(sublist.items, key=lambda i: i.id)

        if json_output:
            print_plain(json.dumps(item.to_dict(), indent=2))
        else:
            console.print(f"[green]✓[/green] Added item {item.id} to '{escape(sublist.name)}': {escape(item.text)}")

    except JotError as e:
        _fail(e)


@list_app.command("item-done")
def item_done(
    sublist_id: int = typer.Argument(..., help="List ID"),
    item_id: int = typer.Argument(..., help="Item ID"),
    undo: bool = typer.Option(False, "--undo", help="Untick the item instead"),
):
    """
    Tick (or with --undo, untick) a checklist item.

    Example:
        jot list item-done 3 7
    """
    try:
        sublist = service.complete_sublist_item(sublist_id, item_id, completed=not undo)
        item = sublist.get_item(item_id)
        marker = "[yellow]○[/yellow]" if undo else "[green]✓[/green]"
        console.print(f"{marker} {escape(item.text)}")

    except JotError as e:
        _fail(e)


@list_app.command("item-edit")
def item_edit(
    sublist_id: int = typer.Argument(..., help="List ID"),
    item_id: int = typer.Argument(..., help="Item ID"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="New text"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="none, priority or high"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due time (HH:MM), '' to clear"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Change an item's text, priority or due time.

    Example:
        jot list item-edit 3 7 --text "Passport + visa" --due 07:30
    """
    try:
        sublist = service.update_sublist_item(
            sublist_id,
            item_id,
            text=text,
            priority=priority,
            due_time=due,
        )
        item = sublist.get_item(item_id)

        if json_output:
            print_plain(json.dumps(item.to_dict(), indent=2))
        else:
            console.print(f"[blue]✎[/blue] Updated item {item.id}: {escape(item.text)}")

    except JotError as e:
        _fail(e)


@list_app.command("item-rm")
def item_rm(
    sublist_id: int = typer.Argument(..., help="List ID"),
    item_id: int = typer.Argument(..., help="Item ID"),
):
    """
    Remove an item from a checklist permanently.

    Example:
        jot list item-rm 3 7
    """
    try:
        service.delete_sublist_item(sublist_id, item_id)
        console.print(f"[red]✗[/red] Removed item {item_id}")

    except JotError as e:
        _fail(e)
