"""
FILE: jot/cli/commands/tasks.py
PURPOSE: Task commands (add, ls, show, done, reopen, edit, rm, restore, purge, assign)
"""

import json
from typing import Optional

import typer
from rich.markup import escape

from ..main import app, console, error_console, print_plain
from ...core import service
from ...core.constants import DEFAULT_PRIORITY, RETENTION_DAYS, SCOPE_ALL, SCOPE_DELETED
from ...core.exceptions import (
    JotError,
    NotFoundError,
    InvalidInputError,
)
from ...formatting import TaskFormatter, print_task_groups


def _space_names() -> dict:
    return {s.id: s.name for s in service.list_spaces()}


def _apply_to_ids(task_ids: str, action):
    """
    Run action(task_id) for each comma-separated id.

    Returns:
        (tasks, errors) - tasks that succeeded and error messages for the rest
    """
    tasks = []
    errors = []

    for id_str in [part.strip() for part in task_ids.split(",") if part.strip()]:
        try:
            tasks.append(action(int(id_str)))
        except ValueError:
            errors.append(f"Invalid task ID: {id_str}")
        except JotError as e:
            errors.append(str(e))

    return tasks, errors


def _report_errors(errors, succeeded: bool) -> None:
    for error in errors:
        error_console.print(f"[red]Error:[/red] {escape(error)}")
    if errors and not succeeded:
        raise typer.Exit(1)


@app.command()
def add(
    text: str = typer.Argument(..., help="Task text"),
    space_name: Optional[str] = typer.Option(None, "--space", "-s", help="Space name"),
    priority: str = typer.Option(DEFAULT_PRIORITY, "--priority", "-p", help="none, priority or high"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        jot add "Write documentation"
        jot add "Fix bug" --space Work --priority high --due 2025-03-01
    """
    try:
        space_id = None
        if space_name:
            space_id = service.find_space_by_name_or_raise(space_name).id

        task = service.create_task(
            text=text,
            space_id=space_id,
            priority=priority,
            due_date=due,
        )

        if json_output:
            print_plain(task.to_json())
        elif raw:
            print_plain(f"{task.id}: {task.text}")
        else:
            console.print(f"[green]✓ Created task [bold]#{task.id}[/bold]:[/green] {escape(task.text)}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except JotError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def ls(
    space_name: Optional[str] = typer.Option(None, "--space", "-s", help="Only tasks in this space"),
    deleted: bool = typer.Option(False, "--deleted", help="Show recently deleted tasks"),
    sort_key: Optional[str] = typer.Option(None, "--sort", help="due (default), priority or created"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks, grouped by due date by default.

    Completed tasks always sink to the bottom of their group.

    Example:
        jot ls
        jot ls --space Work --sort priority
        jot ls --deleted
        jot ls --json
    """
    if deleted and space_name:
        error_console.print("[red]Error:[/red] --deleted and --space can't be combined")
        raise typer.Exit(1)

    scope = SCOPE_DELETED if deleted else (space_name or SCOPE_ALL)

    try:
        groups = service.arrange_tasks(scope, sort_key)

        if json_output:
            print_plain(TaskFormatter.groups_to_json(groups))

        elif raw:
            for group in groups:
                if group.label:
                    print_plain(f"# {group.label}")
                for line in TaskFormatter.to_raw_lines(group.items):
                    print_plain(line)

        else:
            if not groups:
                message = "No recently deleted tasks" if deleted else "No tasks found"
                console.print(f"[dim]{message}[/dim]")
                return

            title = f"Deleted (last {RETENTION_DAYS} days)" if deleted else "Tasks"
            total = print_task_groups(
                console,
                groups,
                space_names=_space_names(),
                show_deleted=deleted,
                title=title,
            )
            console.print(f"\n[dim]Total: {total} task(s)[/dim]")

    except NotFoundError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except JotError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def show(
    task_id: int = typer.Argument(..., help="Task ID to view"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task including its checklists.

    Example:
        jot show 5
    """
    try:
        task = service.get_task(task_id)
        sublists = service.list_sublists(task.id)

        if json_output:
            data = task.to_dict()
            data["sublists"] = [s.to_dict() for s in sublists]
            print_plain(json.dumps(data, indent=2))
            return

        space_name = None
        if task.space_id is not None:
            space = service.get_space(task.space_id)
            space_name = space.name if space else f"#{task.space_id}"

        if raw:
            print_plain(f"Task #{task.id}")
            print_plain(f"Text: {task.text}")
            print_plain(f"Status: {'done' if task.completed else 'open'}")
            print_plain(f"Priority: {task.priority}")
            if task.due_date:
                print_plain(f"Due: {task.due_date}")
            if space_name:
                print_plain(f"Space: {space_name}")
            print_plain(f"Created: {task.created_at}")
            if task.deleted_at:
                print_plain(f"Deleted: {task.deleted_at}")
            for sublist in sublists:
                print_plain(f"List #{sublist.id}: {sublist.name}")
        else:
            console.print(TaskFormatter.create_detail_panel(task, space_name, sublists))

    except JotError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def done(
    task_ids: str = typer.Argument(..., help="Task ID(s) to complete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Mark one or more tasks as complete.

    Example:
        jot done 5
        jot done 3,5,7
    """
    completed, errors = _apply_to_ids(task_ids, service.complete_task)

    if json_output:
        print_plain(TaskFormatter.to_json_array(completed))
    elif raw:
        for task in completed:
            print_plain(f"Completed: {task.text}")
    else:
        for task in completed:
            console.print(f"[green]✓[/green] Completed: {escape(task.text)}")

    _report_errors(errors, bool(completed))


@app.command()
def reopen(
    task_ids: str = typer.Argument(..., help="Task ID(s) to reopen (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Mark one or more completed tasks as not done.

    Example:
        jot reopen 5
    """
    reopened, errors = _apply_to_ids(task_ids, service.uncomplete_task)

    if json_output:
        print_plain(TaskFormatter.to_json_array(reopened))
    elif raw:
        for task in reopened:
            print_plain(f"Reopened: {task.text}")
    else:
        for task in reopened:
            console.print(f"[yellow]○[/yellow] Reopened: {escape(task.text)}")

    _report_errors(errors, bool(reopened))


@app.command()
def edit(
    task_id: int = typer.Argument(..., help="Task ID to edit"),
    new_text: Optional[str] = typer.Argument(None, help="New task text"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="none, priority or high"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Update a task's text, priority or due date.

    Example:
        jot edit 5 "Updated task text"
        jot edit 5 --priority high --due 2025-03-01
        jot edit 5 --clear-due
    """
    if new_text is None and priority is None and due is None and not clear_due:
        error_console.print("[red]Error:[/red] Nothing to change (give new text, --priority, --due or --clear-due)")
        raise typer.Exit(1)

    try:
        task = service.get_task(task_id)
        if new_text is not None:
            task = service.update_task_text(task_id, new_text)
        if priority is not None:
            task = service.set_task_priority(task_id, priority)
        if clear_due:
            task = service.set_task_due_date(task_id, None)
        elif due is not None:
            task = service.set_task_due_date(task_id, due)

        if json_output:
            print_plain(task.to_json())
        elif raw:
            print_plain(f"Updated task {task.id}: {task.text}")
        else:
            console.print(f"[blue]✎[/blue] Updated task {task.id}: {escape(task.text)}")

    except NotFoundError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except JotError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def rm(
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move one or more tasks to the deleted list.

    Deleted tasks can be restored for 30 days (see `jot ls --deleted`).

    Example:
        jot rm 5
        jot rm 3,5,7
    """
    deleted, errors = _apply_to_ids(task_ids, service.delete_task)

    if json_output:
        print_plain(TaskFormatter.to_json_array(deleted))
    elif raw:
        for task in deleted:
            print_plain(f"Deleted task {task.id}: {task.text}")
    else:
        for task in deleted:
            console.print(f"[red]✗[/red] Deleted task {task.id}: {escape(task.text)}")
        if deleted:
            console.print(f"[dim]Undo with: jot restore {','.join(str(t.id) for t in deleted)}[/dim]")

    _report_errors(errors, bool(deleted))


@app.command()
def restore(
    task_ids: str = typer.Argument(..., help="Task ID(s) to restore (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Bring deleted tasks back.

    Example:
        jot restore 5
        jot restore 3,5
    """
    restored, errors = _apply_to_ids(task_ids, service.restore_task)

    if json_output:
        print_plain(TaskFormatter.to_json_array(restored))
    elif raw:
        for task in restored:
            print_plain(f"Restored task {task.id}: {task.text}")
    else:
        for task in restored:
            console.print(f"[green]↺[/green] Restored task {task.id}: {escape(task.text)}")

    _report_errors(errors, bool(restored))


@app.command()
def purge(
    dry_run: bool = typer.Option(False, "--dry-run", help="Only list what would be removed"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Permanently remove tasks deleted more than 30 days ago.

    Example:
        jot purge --dry-run
        jot purge --yes
    """
    try:
        targets = service.list_purge_targets()

        if not targets:
            if json_output:
                print_plain("[]")
            elif not raw:
                console.print("[dim]Nothing to purge[/dim]")
            return

        if not dry_run:
            if not yes and not json_output and not raw:
                console.print(f"[yellow]About to permanently remove {len(targets)} task(s)[/yellow]")
                if not typer.confirm("Continue?", default=False):
                    console.print("[yellow]Cancelled[/yellow]")
                    raise typer.Exit(0)
            targets = service.purge_deleted_tasks()

        if json_output:
            print_plain(TaskFormatter.to_json_array(targets))
        elif raw:
            for task in targets:
                print_plain(f"{task.id}: {task.text}")
        else:
            verb = "Would purge" if dry_run else "Purged"
            for task in targets:
                console.print(f"[red]✗[/red] {verb} task {task.id}: {escape(task.text)}")

    except JotError as e:
        error_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def assign(
    task_ids: str = typer.Argument(..., help="Task ID(s) to assign (comma-separated)"),
    space_name: str = typer.Argument(..., help="Space name, or 'none' to unassign"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    File tasks under a space.

    Example:
        jot assign 5 Work
        jot assign 3,5 "Side Project"
        jot assign 5 none
    """
    try:
        if space_name.strip().lower() == "none":
            space_id, label = None, "no space"
        else:
            space = service.find_space_by_name_or_raise(space_name)
            space_id, label = space.id, space.name
    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    assigned, errors = _apply_to_ids(
        task_ids,
        lambda task_id: service.assign_task_to_space(task_id, space_id),
    )

    if json_output:
        print_plain(TaskFormatter.to_json_array(assigned))
    elif raw:
        for task in assigned:
            print_plain(f"Assigned task {task.id} to {label}")
    else:
        for task in assigned:
            console.print(f"[cyan]→[/cyan] Task {task.id} → {escape(label)}")

    _report_errors(errors, bool(assigned))
