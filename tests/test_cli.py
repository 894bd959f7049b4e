"""
Test suite for the one-shot CLI (jot.cli).

Drives the Typer app through typer.testing.CliRunner against a temporary
database and checks --json output and exit codes.
"""

import json
from datetime import datetime, timedelta

import pytest
from typer.testing import CliRunner

from jot.cli.main import app
from jot.core import repository, service


runner = CliRunner()


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database for all tests."""
    db_path = tmp_path / "test_jot.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    yield db_path


def run_json(*args):
    result = runner.invoke(app, [*args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# --- Tasks ---


def test_add_json():
    data = run_json("add", "Write docs", "--priority", "high", "--due", "2025-03-01")

    assert data["text"] == "Write docs"
    assert data["priority"] == "high"
    assert data["due_date"] == "2025-03-01"
    assert data["deleted_at"] is None
    print(f"✓ add --json returned task {data['id']}")


def test_add_rejects_empty_text():
    result = runner.invoke(app, ["add", "   "])
    assert result.exit_code == 1


def test_add_unknown_space_fails():
    result = runner.invoke(app, ["add", "Report", "--space", "Nowhere"])
    assert result.exit_code == 1


def test_ls_json_groups_by_due_date():
    run_json("add", "A", "--due", "2025-03-01")
    run_json("add", "B", "--due", "2025-03-01", "--priority", "high")
    run_json("add", "C")

    groups = run_json("ls")

    assert [g["label"] for g in groups] == ["2025-03-01", "No Due Date"]
    assert [[t["text"] for t in g["items"]] for g in groups] == [["B", "A"], ["C"]]
    print("✓ ls --json returns labelled groups")


def test_ls_sort_priority_is_one_group():
    run_json("add", "Low")
    run_json("add", "High", "--priority", "high")

    groups = run_json("ls", "--sort", "priority")

    assert len(groups) == 1
    assert groups[0]["label"] is None
    assert [t["text"] for t in groups[0]["items"]] == ["High", "Low"]


def test_ls_bad_sort_key_fails():
    result = runner.invoke(app, ["ls", "--sort", "alphabetical"])
    assert result.exit_code == 1


def test_ls_empty_prints_message():
    result = runner.invoke(app, ["ls"])

    assert result.exit_code == 0
    assert "No tasks found" in result.stdout


def test_done_moves_task_to_bottom():
    first = run_json("add", "First")
    run_json("add", "Second")

    result = runner.invoke(app, ["done", str(first["id"])])
    assert result.exit_code == 0

    groups = run_json("ls")
    assert [t["text"] for t in groups[0]["items"]] == ["Second", "First"]
    assert groups[0]["items"][1]["completed"] is True


def test_done_with_only_bad_ids_fails():
    result = runner.invoke(app, ["done", "99,abc"])
    assert result.exit_code == 1


def test_bracketed_text_is_printed_literally():
    result = runner.invoke(app, ["add", "fix [/] parser"])
    assert result.exit_code == 0, result.output
    assert "fix [/] parser" in result.stdout

    task_id = service.list_tasks()[0].id
    result = runner.invoke(app, ["done", str(task_id)])
    assert result.exit_code == 0, result.output
    assert "fix [/] parser" in result.stdout

    odd = service.create_task("a [/b] c [red]x")
    result = runner.invoke(app, ["done", str(odd.id)])
    assert result.exit_code == 0, result.output
    assert "a [/b] c [red]x" in result.stdout
    print("✓ Task text with square brackets is not read as markup")


def test_rm_then_restore():
    task = run_json("add", "Oops")

    deleted = run_json("rm", str(task["id"]))
    assert deleted[0]["deleted_at"] is not None
    assert run_json("ls") == []

    in_trash = run_json("ls", "--deleted")
    assert [t["id"] for t in in_trash[0]["items"]] == [task["id"]]

    restored = run_json("restore", str(task["id"]))
    assert restored[0]["deleted_at"] is None
    assert run_json("ls", "--deleted") == []
    print("✓ rm / restore round trip through the CLI")


def test_restore_active_task_fails():
    task = run_json("add", "Alive")
    result = runner.invoke(app, ["restore", str(task["id"])])
    assert result.exit_code == 1


def test_ls_deleted_and_space_cannot_combine():
    result = runner.invoke(app, ["ls", "--deleted", "--space", "Work"])
    assert result.exit_code == 1


def test_edit_updates_fields():
    task = run_json("add", "Draft", "--due", "2025-03-01")

    updated = run_json("edit", str(task["id"]), "Final", "--priority", "priority")
    assert updated["text"] == "Final"
    assert updated["priority"] == "priority"

    cleared = run_json("edit", str(task["id"]), "--clear-due")
    assert cleared["due_date"] is None


def test_edit_without_changes_fails():
    task = run_json("add", "Same")
    result = runner.invoke(app, ["edit", str(task["id"])])
    assert result.exit_code == 1


def test_show_json_includes_sublists():
    task = run_json("add", "Trip")
    run_json("list", "add", str(task["id"]), "Packing")

    data = run_json("show", str(task["id"]))

    assert data["text"] == "Trip"
    assert [s["name"] for s in data["sublists"]] == ["Packing"]


def test_show_missing_task_fails():
    result = runner.invoke(app, ["show", "404"])
    assert result.exit_code == 1


def test_purge_removes_expired_tasks_only():
    old = service.create_task("Old")
    recent = service.create_task("Recent")
    service.delete_task(old.id, now=datetime.now() - timedelta(days=40))
    service.delete_task(recent.id)

    preview = run_json("purge", "--dry-run")
    assert [t["id"] for t in preview] == [old.id]
    assert repository.get_task(old.id) is not None

    purged = run_json("purge")
    assert [t["id"] for t in purged] == [old.id]
    assert repository.get_task(old.id) is None
    assert repository.get_task(recent.id) is not None

    assert run_json("purge") == []
    print("✓ purge honours the retention window")


def test_assign_to_space_and_back():
    run_json("space", "add", "Work")
    task = run_json("add", "Report")

    assigned = run_json("assign", str(task["id"]), "work")
    assert assigned[0]["space_id"] is not None

    groups = run_json("ls", "--space", "Work")
    assert [t["id"] for t in groups[0]["items"]] == [task["id"]]

    unassigned = run_json("assign", str(task["id"]), "none")
    assert unassigned[0]["space_id"] is None


# --- Spaces ---


def test_space_add_and_ls():
    space = run_json("space", "add", "Home")

    spaces = run_json("space", "ls")

    assert spaces == [space]


def test_ls_space_with_numeric_name():
    space = run_json("space", "add", "2025")
    run_json("add", "Taxes", "--space", "2025")
    run_json("add", "Unfiled")

    groups = run_json("ls", "--space", "2025")

    assert [t["text"] for g in groups for t in g["items"]] == ["Taxes"]
    assert groups[0]["items"][0]["space_id"] == space["id"]


def test_space_with_bracketed_name_lists_cleanly():
    run_json("space", "add", "[bold]ops[/]")

    result = runner.invoke(app, ["space", "ls"])

    assert result.exit_code == 0, result.output
    assert "[bold]ops[/]" in result.stdout


def test_space_add_reserved_name_fails():
    result = runner.invoke(app, ["space", "add", "deleted"])
    assert result.exit_code == 1


def test_space_rm_soft_deletes_tasks():
    space = run_json("space", "add", "Side Project")
    run_json("add", "Design", "--space", "Side Project")
    run_json("add", "Build", "--space", "Side Project")

    data = run_json("space", "rm", "Side Project")

    assert data == {"id": space["id"], "name": "Side Project", "deleted_tasks": 2}
    assert run_json("space", "ls") == []
    assert run_json("ls") == []
    in_trash = run_json("ls", "--deleted")
    assert sorted(t["text"] for t in in_trash[0]["items"]) == ["Build", "Design"]
    print("✓ space rm sends its tasks to the deleted list")


def test_space_rm_missing_fails():
    result = runner.invoke(app, ["space", "rm", "42", "--yes"])
    assert result.exit_code == 1


# --- Sub-lists ---


def test_list_items_grouped_by_due_time():
    task = run_json("add", "Day plan")
    sublist = run_json("list", "add", str(task["id"]))
    assert sublist["name"] == "New List"

    sid = str(sublist["id"])
    lunch = run_json("list", "item-add", sid, "Lunch", "--due", "12:00")
    run_json("list", "item-add", sid, "Coffee", "--due", "08:15")
    untitled = run_json("list", "item-add", sid)
    assert untitled["text"] == "Untitled"

    result = runner.invoke(app, ["list", "item-done", sid, str(lunch["id"])])
    assert result.exit_code == 0

    data = run_json("list", "show", sid)

    assert data["name"] == "New List"
    assert [g["label"] for g in data["groups"]] == ["Due by 08:15", "Due by 12:00", "No Due Time"]
    assert data["groups"][1]["items"][0]["completed"] is True
    print("✓ list show groups items by due time")


def test_list_rename_and_rm():
    task = run_json("add", "Trip")
    sublist = run_json("list", "add", str(task["id"]), "Packing")
    sid = str(sublist["id"])

    renamed = run_json("list", "rename", sid, "Bag")
    assert renamed["name"] == "Bag"

    result = runner.invoke(app, ["list", "rm", sid, "--yes"])
    assert result.exit_code == 0
    assert run_json("list", "ls", str(task["id"])) == []


def test_item_edit_and_rm():
    task = run_json("add", "Trip")
    sid = str(run_json("list", "add", str(task["id"]))["id"])
    item = run_json("list", "item-add", sid, "Socks", "--due", "07:00")

    edited = run_json("list", "item-edit", sid, str(item["id"]), "--text", "Warm socks", "--due", "")
    assert edited["text"] == "Warm socks"
    assert edited["due_time"] is None

    result = runner.invoke(app, ["list", "item-rm", sid, str(item["id"])])
    assert result.exit_code == 0

    result = runner.invoke(app, ["list", "item-rm", sid, str(item["id"])])
    assert result.exit_code == 1


def test_list_add_requires_existing_task():
    result = runner.invoke(app, ["list", "add", "77"])
    assert result.exit_code == 1


# --- System ---


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "jot v0.1.0" in result.stdout
