"""
FILE: jot/repl/commands/lists.py
PURPOSE: Checklist (sub-list) command handlers for REPL
NOTES:
  - list <add|ls|show|rm|rename|item> ...
  - list item <add|done|undone|edit|rm> ...
  - Lists and items are removed for good, after confirmation for non-empty lists
"""

from rich.markup import escape

from ..main import console, repl_context
from ..parser import ParseResult
from ...core import service
from ...core.constants import DEFAULT_PRIORITY
from ...core.exceptions import JotError
from ...formatting import SubListFormatter, print_item_groups
from .tasks import ask_confirmation


def _int_args(result: ParseResult, count: int, usage: str):
    """First `count` args as ints, or None after printing usage."""
    try:
        if len(result.args) < count:
            raise ValueError
        return [int(a) for a in result.args[:count]]
    except ValueError:
        console.print("[red]Error:[/red] Missing or invalid ID")
        console.print(f"[dim]Usage: {escape(usage)}[/dim]")
        return None


def handle_list_add_command(result: ParseResult) -> None:
    """
    Usage:
        list add 42              # "New List" on task 42
        list add 42 Packing
    """
    ids = _int_args(result, 1, "list add <task_id> [name]")
    if ids is None:
        return

    try:
        sublist = service.create_sublist(ids[0], " ".join(result.args[1:]))
        console.print(f"[green]✓ Created list[/green] [cyan]{sublist.id}[/cyan]: {escape(sublist.name)}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_list_ls_command(result: ParseResult) -> None:
    """
    Usage:
        list ls 42
    """
    ids = _int_args(result, 1, "list ls <task_id>")
    if ids is None:
        return

    try:
        service.get_task(ids[0])
        sublists = service.list_sublists(ids[0])
        if not sublists:
            console.print(f"[dim]Task {ids[0]} has no lists[/dim]")
            return
        console.print(SubListFormatter.create_lists_table(sublists, title=None))
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_list_show_command(result: ParseResult) -> None:
    """
    Show a list's items, sorted like the task view unless --sort is given.

    Usage:
        list show 3
        list show 3 --sort priority
    """
    ids = _int_args(result, 1, "list show <list_id> [--sort KEY]")
    if ids is None:
        return

    try:
        sort_key = result.flag("sort") or repl_context.view.sort_key
        sublist, groups = service.arrange_sublist(ids[0], sort_key)
        print_item_groups(console, sublist, groups)
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_list_rm_command(result: ParseResult) -> None:
    """
    Usage:
        list rm 3
    """
    ids = _int_args(result, 1, "list rm <list_id>")
    if ids is None:
        return

    try:
        sublist = service.get_sublist(ids[0])
        if sublist.items and not ask_confirmation(
            f"Delete '{sublist.name}' and its {len(sublist.items)} item(s) permanently?"
        ):
            console.print("[yellow]Cancelled[/yellow]")
            return
        service.delete_sublist(sublist.id)
        console.print(f"[red]✗[/red] Deleted list {sublist.id}: {escape(sublist.name)}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_list_rename_command(result: ParseResult) -> None:
    """
    Usage:
        list rename 3 Groceries
    """
    ids = _int_args(result, 1, "list rename <list_id> <name>")
    if ids is None:
        return

    try:
        sublist = service.rename_sublist(ids[0], " ".join(result.args[1:]))
        console.print(f"[blue]✎[/blue] Renamed list {sublist.id}: {escape(sublist.name)}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_item_add_command(result: ParseResult) -> None:
    """
    Usage:
        list item add 3 Passport --due 08:00 --priority high
    """
    ids = _int_args(result, 1, "list item add <list_id> [text] [--priority P] [--due HH:MM]")
    if ids is None:
        return

    try:
        sublist = service.add_sublist_item(
            ids[0],
            " ".join(result.args[1:]),
            priority=result.flag("priority") or DEFAULT_PRIORITY,
            due_time=result.flag("due"),
        )
        item = max(sublist.items, key=lambda i: i.id)
        console.print(f"[green]✓ Added[/green] [cyan]{item.id}[/cyan]: {escape(item.text)}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def _set_item_completed(result: ParseResult, completed: bool) -> None:
    verb = "done" if completed else "undone"
    ids = _int_args(result, 2, f"list item {verb} <list_id> <item_id>")
    if ids is None:
        return

    try:
        sublist = service.complete_sublist_item(ids[0], ids[1], completed=completed)
        item = sublist.get_item(ids[1])
        marker = "[green]✓[/green]" if completed else "[yellow]○[/yellow]"
        console.print(f"{marker} {escape(item.text)}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_item_done_command(result: ParseResult) -> None:
    _set_item_completed(result, True)


def handle_item_undone_command(result: ParseResult) -> None:
    _set_item_completed(result, False)


def handle_item_edit_command(result: ParseResult) -> None:
    """
    Usage:
        list item edit 3 7 "New text"
        list item edit 3 7 --priority high --due 07:30
        list item edit 3 7 --due ""      # clear the due time
    """
    ids = _int_args(result, 2, 'list item edit <list_id> <item_id> ["text"] [--priority P] [--due HH:MM]')
    if ids is None:
        return

    text = " ".join(result.args[2:]) or None

    try:
        sublist = service.update_sublist_item(
            ids[0],
            ids[1],
            text=text,
            priority=result.flag("priority"),
            due_time=result.flag("due"),
        )
        item = sublist.get_item(ids[1])
        console.print(f"[blue]✎[/blue] Updated item {item.id}: {escape(item.text)}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_item_rm_command(result: ParseResult) -> None:
    """
    Usage:
        list item rm 3 7
    """
    ids = _int_args(result, 2, "list item rm <list_id> <item_id>")
    if ids is None:
        return

    try:
        service.delete_sublist_item(ids[0], ids[1])
        console.print(f"[red]✗[/red] Removed item {ids[1]}")
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


ITEM_HANDLERS = {
    "add": handle_item_add_command,
    "done": handle_item_done_command,
    "undone": handle_item_undone_command,
    "edit": handle_item_edit_command,
    "rm": handle_item_rm_command,
}


def handle_item_command(result: ParseResult) -> None:
    sub_result = result.subcommand()
    handler = ITEM_HANDLERS.get(sub_result.command)
    if handler:
        handler(sub_result)
    else:
        console.print(f"[red]Unknown item command:[/red] {escape(sub_result.command or '(none)')}")
        console.print(f"[dim]Available: {', '.join(ITEM_HANDLERS)}[/dim]")


LIST_HANDLERS = {
    "add": handle_list_add_command,
    "ls": handle_list_ls_command,
    "show": handle_list_show_command,
    "rm": handle_list_rm_command,
    "rename": handle_list_rename_command,
    "item": handle_item_command,
}


def handle_list_command(result: ParseResult) -> None:
    """
    Handle 'list' command - dispatch to subcommand.

    Usage:
        list <add|ls|show|rm|rename|item> ...
    """
    if not result.args:
        console.print("[red]Error:[/red] List subcommand required")
        console.print("[dim]Usage: list <add|ls|show|rm|rename|item> ...[/dim]")
        return

    sub_result = result.subcommand()
    handler = LIST_HANDLERS.get(sub_result.command)
    if handler:
        handler(sub_result)
    else:
        console.print(f"[red]Unknown list command:[/red] {escape(sub_result.command)}")
        console.print(f"[dim]Available: {', '.join(LIST_HANDLERS)}[/dim]")
