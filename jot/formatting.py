"""
FILE: jot/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Rich tables, JSON and plain lines for tasks
  - SubListFormatter: Rich tables, JSON and plain lines for sub-lists
  - format_group_label(label) -> str
  - parse_ids(id_string) -> List[int]
  - print_task_groups(console, groups, ...) -> int
  - print_item_groups(console, sublist, groups) -> None
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - jot.core.models, jot.core.arrange
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
  - Group labels that are ISO dates are shown as long dates
"""

import json
from datetime import date
from typing import Dict, Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.arrange import Group
from .core.constants import PRIORITY_HIGH, PRIORITY_NORMAL
from .core.models import Task, SubList, SubListItem


PRIORITY_STYLES = {
    PRIORITY_HIGH: "bold red",
    PRIORITY_NORMAL: "yellow",
}


def format_group_label(label: Optional[str]) -> str:
    """
    Human-readable group heading.

    Examples:
        "2025-03-01" -> "Saturday, March 01, 2025"
        "Due by 09:30" -> "Due by 09:30"
    """
    if not label:
        return ""
    try:
        day = date.fromisoformat(label)
    except ValueError:
        return label
    return day.strftime("%A, %B %d, %Y")


def _priority_cell(priority: str) -> str:
    style = PRIORITY_STYLES.get(priority)
    return f"[{style}]{priority}[/{style}]" if style else "[dim]-[/dim]"


def _check_cell(completed: bool) -> str:
    return "[green]✓[/green]" if completed else "[yellow]○[/yellow]"


def _strike(text: str, completed: bool) -> str:
    text = escape(text)
    return f"[strike dim]{text}[/strike dim]" if completed else text


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(
        tasks: List[Task],
        title: Optional[str] = "Tasks",
        space_names: Optional[Dict[int, str]] = None,
        show_space: bool = True,
        show_deleted: bool = False,
        marks: Optional[Dict[int, str]] = None,
    ) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: List of tasks to display
            title: Table title (None for no title)
            space_names: Space id -> name, for the Space column
            show_space: Whether to show the Space column
            show_deleted: Whether to show the Deleted column
            marks: Optional task id -> short marker shown after the text

        Returns:
            Rich Table object ready for display
        """
        space_names = space_names or {}
        marks = marks or {}

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("", width=2)
        table.add_column("Task", style="white")
        table.add_column("Priority", width=9)
        table.add_column("Due", style="blue", width=12)

        if show_space:
            table.add_column("Space", style="magenta", width=12)

        if show_deleted:
            table.add_column("Deleted", style="dim")

        for task in tasks:
            text = _strike(task.text, task.completed)
            if task.id in marks:
                text = f"{text} [dim]{marks[task.id]}[/dim]"

            row = [
                str(task.id),
                _check_cell(task.completed),
                text,
                _priority_cell(task.priority),
                (task.due_date or "-")[:10],
            ]

            if show_space:
                if task.space_id is None:
                    row.append("-")
                elif task.space_id in space_names:
                    row.append(escape(space_names[task.space_id]))
                else:
                    row.append(f"[dim]ID:{task.space_id}[/dim]")

            if show_deleted:
                row.append((task.deleted_at or "").split("T")[0])

            table.add_row(*row)

        return table

    @staticmethod
    def groups_to_json(groups: Iterable[Group]) -> str:
        """
        Convert arranged groups to a JSON array string.

        Returns:
            JSON string: [{"label": ..., "items": [task, ...]}, ...]
        """
        data = [
            {"label": g.label, "items": [t.to_dict() for t in g.items]}
            for g in groups
        ]
        return json.dumps(data, indent=2)

    @staticmethod
    def to_json_array(tasks: Iterable[Task]) -> str:
        return json.dumps([t.to_dict() for t in tasks], indent=2)

    @staticmethod
    def to_raw_lines(tasks: Iterable[Task]) -> List[str]:
        """
        Convert task list to plain text lines.

        Returns:
            List of formatted strings, one per task
        """
        lines = []
        for task in tasks:
            status_marker = "✓" if task.completed else " "
            due = f" (due {task.due_date[:10]})" if task.due_date else ""
            lines.append(f"{task.id}: [{status_marker}] {task.text}{due}")
        return lines

    @staticmethod
    def create_detail_panel(
        task: Task,
        space_name: Optional[str] = None,
        sublists: Optional[List[SubList]] = None,
    ) -> Panel:
        """
        Create the expanded view of a task: fields plus its checklists.

        Args:
            task: Task to describe
            space_name: Resolved name of task.space_id, if any
            sublists: Checklists attached to the task
        """
        details = Text()
        details.append(f"Task #{task.id}\n", style="bold cyan")
        details.append(f"{task.text}\n\n", style="bold white")

        details.append("Status: ", style="dim")
        if task.completed:
            details.append("done\n", style="green")
        else:
            details.append("open\n", style="yellow")

        details.append("Priority: ", style="dim")
        details.append(f"{task.priority}\n", style=PRIORITY_STYLES.get(task.priority, "white"))

        details.append("Due: ", style="dim")
        details.append(f"{task.due_date or '-'}\n", style="blue")

        if space_name:
            details.append("Space: ", style="dim")
            details.append(f"{space_name}\n", style="magenta")

        details.append("Created: ", style="dim")
        details.append(f"{task.created_at or '-'}\n", style="white")

        if task.deleted_at:
            details.append("Deleted: ", style="dim")
            details.append(f"{task.deleted_at}\n", style="red")

        for sublist in sublists or []:
            details.append(f"\n{sublist.name}", style="bold")
            details.append(f" (#{sublist.id})\n", style="dim")
            if not sublist.items:
                details.append("  (empty)\n", style="dim")
            for item in sublist.items:
                marker = "✓" if item.completed else "○"
                due = f" by {item.due_time}" if item.due_time else ""
                details.append(f"  {marker} {item.id}: {item.text}{due}\n")

        return Panel(details, border_style="blue", padding=(1, 2))


class SubListFormatter:
    """Centralized sub-list display formatting."""

    @staticmethod
    def create_items_table(items: List[SubListItem], title: Optional[str] = None) -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("", width=2)
        table.add_column("Item", style="white")
        table.add_column("Priority", width=9)
        table.add_column("Due", style="blue", width=7)

        for item in items:
            table.add_row(
                str(item.id),
                _check_cell(item.completed),
                _strike(item.text, item.completed),
                _priority_cell(item.priority),
                item.due_time or "-",
            )

        return table

    @staticmethod
    def create_lists_table(sublists: List[SubList], title: Optional[str] = "Sub-lists") -> Table:
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=6, no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Done", style="green", width=8)

        for sublist in sublists:
            done = sum(1 for i in sublist.items if i.completed)
            table.add_row(str(sublist.id), escape(sublist.name), f"{done}/{len(sublist.items)}")

        return table

    @staticmethod
    def groups_to_json(sublist: SubList, groups: Iterable[Group]) -> str:
        data = {
            "id": sublist.id,
            "task_id": sublist.task_id,
            "name": sublist.name,
            "groups": [
                {"label": g.label, "items": [i.to_dict() for i in g.items]}
                for g in groups
            ],
        }
        return json.dumps(data, indent=2)

    @staticmethod
    def to_raw_lines(items: Iterable[SubListItem]) -> List[str]:
        lines = []
        for item in items:
            status_marker = "✓" if item.completed else " "
            due = f" (by {item.due_time})" if item.due_time else ""
            lines.append(f"{item.id}: [{status_marker}] {item.text}{due}")
        return lines


def parse_ids(id_string: str) -> List[int]:
    """
    Parse comma-separated IDs.

    Args:
        id_string: Comma-separated string of IDs (e.g., "1,2,3")

    Returns:
        List of integers

    Raises:
        ValueError: If any ID is not a valid integer
    """
    ids = [part.strip() for part in id_string.split(",")]
    return [int(part) for part in ids if part]


def print_task_groups(
    console: Console,
    groups: List[Group],
    space_names: Optional[Dict[int, str]] = None,
    show_deleted: bool = False,
    marks: Optional[Dict[int, str]] = None,
    title: str = "Tasks",
) -> int:
    """
    Print arranged task groups, one table per group with the label as heading.

    Returns:
        Number of tasks printed
    """
    total = 0
    for group in groups:
        if group.label:
            console.print(f"\n[bold]{escape(format_group_label(group.label))}[/bold]")
        console.print(
            TaskFormatter.create_table(
                group.items,
                title=None if group.label else title,
                space_names=space_names,
                show_deleted=show_deleted,
                marks=marks,
            )
        )
        total += len(group.items)
    return total


def print_item_groups(console: Console, sublist: SubList, groups: List[Group]) -> None:
    """Print a sub-list's arranged items under the list name."""
    console.print(f"[bold cyan]{escape(sublist.name)}[/bold cyan] [dim](#{sublist.id})[/dim]")
    if not groups:
        console.print("[dim]  No items yet[/dim]")
        return

    for group in groups:
        if group.label:
            console.print(f"[bold]{escape(group.label)}[/bold]")
        console.print(SubListFormatter.create_items_table(group.items))
