"""
FILE: jot/repl/commands/tasks.py
PURPOSE: Task command handlers for REPL
NOTES:
  - The list view follows repl_context.view: scope, sort key, expanded
    and editing tasks
  - Saving an edit leaves edit mode and collapses the task
"""

from typing import Callable, List

from rich.markup import escape

from ..main import console, repl_context
from ..parser import ParseResult
from ...core import service
from ...core.constants import DEFAULT_PRIORITY, SCOPE_ALL, SCOPE_DELETED
from ...core.exceptions import (
    JotError,
    NotFoundError,
    InvalidInputError,
)
from ...core.models import Task
from ...formatting import TaskFormatter, parse_ids, print_task_groups


EXPANDED_MARK = "▾"
EDITING_MARK = "✎ editing"


# Helper function
def ask_confirmation(message: str) -> bool:
    """Ask user for confirmation (y/n)."""
    response = input(f"{message} (y/n): ").strip().lower()
    return response in ('y', 'yes')


def _parse_ids_or_warn(result: ParseResult, usage: str) -> List[int]:
    if not result.args:
        console.print("[red]Error:[/red] Task ID(s) required")
        console.print(f"[dim]Usage: {escape(usage)}[/dim]")
        return []
    try:
        return parse_ids(",".join(result.args))
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid task ID(s): {escape(' '.join(result.args))}")
        return []


def _for_each_id(ids: List[int], action: Callable[[int], Task]) -> List[Task]:
    """Apply action to each id, printing errors and returning the successes."""
    done = []
    for task_id in ids:
        try:
            done.append(action(task_id))
        except JotError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
    return done


def _space_name(task: Task):
    if task.space_id is None:
        return None
    space = service.get_space(task.space_id)
    return space.name if space else f"#{task.space_id}"


def show_task_detail(task: Task) -> None:
    console.print(
        TaskFormatter.create_detail_panel(task, _space_name(task), service.list_sublists(task.id))
    )


def visible_task_ids() -> List[int]:
    """Ids of the tasks in the current scope, in display order."""
    groups = service.arrange_tasks(repl_context.view.scope, repl_context.view.sort_key)
    return [task.id for group in groups for task in group.items]


def render_view(sort_key: str = None) -> None:
    """
    Print the current scope as grouped tables, then the expanded tasks.

    Args:
        sort_key: One-off override of the view's sort key
    """
    view = repl_context.view

    try:
        groups = service.arrange_tasks(view.scope, sort_key or view.sort_key)
    except NotFoundError as e:
        # The space behind the saved scope is gone
        console.print(f"[yellow]{escape(str(e))}; showing all tasks[/yellow]")
        repl_context.view = view.with_scope(SCOPE_ALL)
        view = repl_context.view
        groups = service.arrange_tasks(view.scope, sort_key or view.sort_key)

    if not groups:
        if view.scope == SCOPE_DELETED:
            console.print("[dim]No recently deleted tasks[/dim]")
        else:
            console.print("[dim]No tasks found[/dim]")
        return

    marks = {}
    for task_id in view.expanded_ids:
        marks[task_id] = EXPANDED_MARK
    for task_id in view.editing_ids:
        marks[task_id] = EDITING_MARK

    space_names = {s.id: s.name for s in service.list_spaces()}
    title = "Recently deleted" if view.scope == SCOPE_DELETED else "Tasks"
    total = print_task_groups(
        console,
        groups,
        space_names=space_names,
        show_deleted=view.scope == SCOPE_DELETED,
        marks=marks,
        title=title,
    )
    console.print(f"[dim]{total} task(s)[/dim]")

    for group in groups:
        for task in group.items:
            if view.is_expanded(task.id) or view.is_editing(task.id):
                show_task_detail(task)


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create new task.

    New tasks land in the current space unless --space says otherwise.

    Usage:
        add Buy groceries
        add "Call mom" --priority high --due 2025-03-01
        add "Draft" --space Work
    """
    if not result.args:
        console.print("[red]Error:[/red] Task text required")
        console.print("[dim]Usage: add <text> [--priority none|priority|high] [--due YYYY-MM-DD] [--space NAME][/dim]")
        return

    # Join all args as the text (in case they didn't use quotes)
    text = " ".join(result.args)

    try:
        space_id = None
        space_name = result.flag("space")
        if space_name:
            space_id = service.find_space_by_name_or_raise(space_name).id
        elif isinstance(repl_context.view.scope, int):
            space_id = repl_context.view.scope

        task = service.create_task(
            text=text,
            space_id=space_id,
            priority=result.flag("priority") or DEFAULT_PRIORITY,
            due_date=result.flag("due"),
        )
        console.print(f"[green]✓ Created[/green] [cyan]#{task.id}[/cyan]: {escape(task.text)}")
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
    except JotError as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def handle_ls_command(result: ParseResult) -> None:
    """
    Handle 'ls' command - show the current view.

    Usage:
        ls                    # current scope and sort
        ls --sort priority    # one-off sort without changing the view
    """
    try:
        render_view(result.flag("sort"))
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
    except JotError as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def handle_show_command(result: ParseResult) -> None:
    """
    Handle 'show' command - full details for one task.

    Usage:
        show 42
    """
    ids = _parse_ids_or_warn(result, "show <task_id>")
    for task_id in ids:
        try:
            show_task_detail(service.get_task(task_id))
        except JotError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_expand_command(result: ParseResult) -> None:
    """
    Handle 'expand' command - toggle a task's expanded view.

    Outside bulk edit, expanding a task collapses the others.

    Usage:
        expand 42
    """
    ids = _parse_ids_or_warn(result, "expand <task_id>")
    for task_id in ids:
        try:
            task = service.get_task(task_id)
        except JotError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            continue

        repl_context.view = repl_context.view.toggle_expanded(task_id)
        if repl_context.view.is_expanded(task_id):
            show_task_detail(task)
        else:
            console.print(f"[dim]Collapsed #{task_id}[/dim]")


def handle_bulk_command(result: ParseResult) -> None:
    """
    Handle 'bulk' command - toggle bulk edit.

    Entering bulk edit expands every task in view; leaving collapses all.

    Usage:
        bulk
    """
    try:
        all_ids = visible_task_ids()
    except JotError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    repl_context.view = repl_context.view.toggle_bulk_edit(all_ids)

    if repl_context.view.bulk_edit:
        console.print(f"[yellow]Bulk edit on[/yellow] [dim]({len(all_ids)} task(s) expanded)[/dim]")
        render_view()
    else:
        console.print("[dim]Bulk edit off[/dim]")


def handle_done_command(result: ParseResult) -> None:
    """
    Handle 'done' command - mark task(s) complete.

    Usage:
        done 42
        done 1,2,3
    """
    ids = _parse_ids_or_warn(result, "done <task_id>[,<task_id>...]")
    for task in _for_each_id(ids, service.complete_task):
        console.print(f"[green]✓[/green] Completed: {escape(task.text)}")


def handle_undone_command(result: ParseResult) -> None:
    """
    Handle 'undone' command - reopen completed task(s).

    Usage:
        undone 42
    """
    ids = _parse_ids_or_warn(result, "undone <task_id>[,<task_id>...]")
    for task in _for_each_id(ids, service.uncomplete_task):
        console.print(f"[yellow]○[/yellow] Reopened: {escape(task.text)}")


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command.

    Usage:
        edit 42                                   # enter edit mode (expands the task)
        edit 42 "New text" --priority high        # save changes, leave edit mode
        edit 42 --due 2025-03-01
        edit 42 --due ""                          # clear the due date
        edit 42 --cancel                          # leave edit mode without changes
    """
    usage = 'edit <task_id> ["new text"] [--priority P] [--due YYYY-MM-DD] [--cancel]'
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print(f"[dim]Usage: {escape(usage)}[/dim]")
        return

    try:
        task_id = int(result.args[0])
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid task ID: {escape(result.args[0])}")
        return

    new_text = " ".join(result.args[1:])
    priority = result.flag("priority")
    due = result.flag("due")

    try:
        task = service.get_task(task_id)

        if result.flags.get("cancel"):
            repl_context.view = repl_context.view.stop_editing(task_id)
            console.print(f"[dim]Stopped editing #{task_id}[/dim]")
            return

        if not new_text and priority is None and due is None:
            view = repl_context.view.start_editing(task_id)
            if not view.is_expanded(task_id):
                view = view.toggle_expanded(task_id)
            repl_context.view = view
            show_task_detail(task)
            console.print(f"[dim]Editing #{task_id}. Save with: {escape(usage)}[/dim]")
            return

        if new_text:
            task = service.update_task_text(task_id, new_text)
        if priority is not None:
            task = service.set_task_priority(task_id, priority)
        if due is not None:
            task = service.set_task_due_date(task_id, due)

        repl_context.view = repl_context.view.stop_editing(task_id)
        console.print(f"[blue]✎[/blue] Updated #{task.id}: {escape(task.text)}")

    except NotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
    except JotError as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - move task(s) to the deleted list.

    Usage:
        rm 42
        rm 1,2,3
    """
    ids = _parse_ids_or_warn(result, "rm <task_id>[,<task_id>...]")
    deleted = _for_each_id(ids, service.delete_task)

    for task in deleted:
        repl_context.view = repl_context.view.stop_editing(task.id)
        console.print(f"[red]✗[/red] Deleted #{task.id}: {escape(task.text)}")

    if deleted:
        console.print(f"[dim]Undo with: restore {','.join(str(t.id) for t in deleted)}[/dim]")


def handle_restore_command(result: ParseResult) -> None:
    """
    Handle 'restore' command - bring deleted task(s) back.

    Usage:
        restore 42
        restore 1,2
    """
    ids = _parse_ids_or_warn(result, "restore <task_id>[,<task_id>...]")
    for task in _for_each_id(ids, service.restore_task):
        console.print(f"[green]↺[/green] Restored #{task.id}: {escape(task.text)}")


def handle_purge_command(result: ParseResult) -> None:
    """
    Handle 'purge' command - permanently remove tasks deleted 30+ days ago.

    Usage:
        purge
    """
    try:
        targets = service.list_purge_targets()
        if not targets:
            console.print("[dim]Nothing to purge[/dim]")
            return

        console.print(f"[yellow]{len(targets)} task(s) were deleted over 30 days ago[/yellow]")
        if not ask_confirmation("Remove them permanently?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

        purged = service.purge_deleted_tasks()
        console.print(f"[red]✗[/red] Purged {len(purged)} task(s)")
    except JotError as e:
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")


def handle_assign_command(result: ParseResult) -> None:
    """
    Handle 'assign' command - file task(s) under a space.

    Usage:
        assign 42 Work
        assign 1,2 "Side Project"
        assign 42 none
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Task ID(s) and space required")
        console.print("[dim]Usage: assign <task_id>[,<task_id>...] <space|none>[/dim]")
        return

    space_name = " ".join(result.args[1:])
    try:
        ids = parse_ids(result.args[0])
        if space_name.lower() == "none":
            space_id, label = None, "no space"
        else:
            space = service.find_space_by_name_or_raise(space_name)
            space_id, label = space.id, space.name
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid task ID(s): {escape(result.args[0])}")
        return
    except InvalidInputError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    for task in _for_each_id(ids, lambda task_id: service.assign_task_to_space(task_id, space_id)):
        console.print(f"[cyan]→[/cyan] #{task.id} → {escape(label)}")
