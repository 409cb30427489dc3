# tests/test_cli.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskflow.cli import main
from taskflow.manager import TaskManager
from taskflow.storage import FileStorage


@pytest.fixture()
def data_dir(tmp_path: Path) -> str:
    return str(tmp_path / "data")


def run(data_dir: str, *argv: str) -> int:
    return main(["--dir", data_dir, *argv])


def _reload(data_dir: str) -> TaskManager:
    return TaskManager(FileStorage(data_dir))


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_lists_shows_default(data_dir: str, capsys) -> None:
    assert run(data_dir, "lists") == 0
    assert "[1] 🏠 Personal" in capsys.readouterr().out


def test_add_and_toggle_tasks(data_dir: str, capsys) -> None:
    assert run(data_dir, "add", "  Buy milk  ") == 0
    task = _reload(data_dir).lists[0].tasks[0]
    assert task.text == "Buy milk"

    assert run(data_dir, "done", str(task.id)) == 0
    assert run(data_dir, "priority", str(task.id)) == 0
    assert run(data_dir, "today", str(task.id)) == 0
    assert run(data_dir, "edit", str(task.id), "Buy oat milk") == 0

    reloaded = _reload(data_dir).lists[0].tasks[0]
    assert reloaded.text == "Buy oat milk"
    assert reloaded.completed and reloaded.priority and reloaded.today

    assert run(data_dir, "delete", str(task.id)) == 0
    assert _reload(data_dir).lists[0].tasks == []


def test_rejections_exit_nonzero(data_dir: str, capsys) -> None:
    assert run(data_dir, "add", "   ") == 1
    assert run(data_dir, "add", "x", "--list", "404") == 1
    assert run(data_dir, "done", "404") == 1
    assert run(data_dir, "new-list", "  ") == 1
    assert run(data_dir, "delete-list", "404") == 1
    assert run(data_dir, "show", "--list", "404") == 1
    assert run(data_dir, "stats", "--list", "404") == 1


def test_lists_lifecycle(data_dir: str, capsys) -> None:
    assert run(data_dir, "new-list", "Work", "--icon", "💼") == 0
    work = _reload(data_dir).lists[1]
    assert (work.name, work.icon) == ("Work", "💼")

    assert run(data_dir, "add", "report", "--list", str(work.id)) == 0
    assert run(data_dir, "delete-list", str(work.id)) == 0
    manager = _reload(data_dir)
    assert [l.name for l in manager.lists] == ["Personal"]
    assert manager.all_tasks() == []


def test_show_views_and_json(data_dir: str, capsys) -> None:
    run(data_dir, "add", "urgent")
    run(data_dir, "add", "later")
    urgent = _reload(data_dir).lists[0].tasks[0]
    run(data_dir, "priority", str(urgent.id))
    capsys.readouterr()

    assert run(data_dir, "show", "--view", "priority", "--json") == 0
    shown = json.loads(capsys.readouterr().out)
    assert [t["text"] for t in shown] == ["urgent"]

    assert run(data_dir, "show", "--view", "today") == 0
    assert "Nothing open" in capsys.readouterr().out

    assert run(data_dir, "show") == 0
    out = capsys.readouterr().out
    assert out.index("urgent") < out.index("later")


def test_stats_json(data_dir: str, capsys) -> None:
    for text in ("a", "b", "c", "d"):
        run(data_dir, "add", text)
    for task in _reload(data_dir).lists[0].tasks[:3]:
        run(data_dir, "done", str(task.id))
    capsys.readouterr()

    assert run(data_dir, "stats", "--json") == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats == {"total": 4, "completed": 3, "pending": 1, "completion_rate": 75}


def test_export_html_escapes(data_dir: str, capsys) -> None:
    run(data_dir, "add", "<img src=x onerror=alert(1)>")
    capsys.readouterr()

    assert run(data_dir, "export-html") == 0
    out = capsys.readouterr().out
    assert "&lt;img src=x onerror=alert(1)&gt;" in out
    assert "<img" not in out


def test_theme(data_dir: str, capsys) -> None:
    assert run(data_dir, "theme") == 0
    assert "Theme: light" in capsys.readouterr().out

    assert run(data_dir, "theme", "toggle") == 0
    assert "Theme: dark" in capsys.readouterr().out

    assert run(data_dir, "theme", "light") == 0
    assert FileStorage(data_dir).load("theme") == "light"


def test_pomodoro_count_and_reset(data_dir: str, capsys) -> None:
    assert run(data_dir, "pomodoro", "--count") == 0
    assert "Sessions today: 0" in capsys.readouterr().out

    run(data_dir, "new-list", "Work")
    assert run(data_dir, "reset") == 0
    assert [l.name for l in _reload(data_dir).lists] == ["Personal"]


def test_add_without_any_list_explains_how_to_create_one(data_dir: str, capsys) -> None:
    assert run(data_dir, "delete-list", "1") == 0
    capsys.readouterr()

    assert run(data_dir, "add", "orphan") == 1
    out = capsys.readouterr().out
    assert "No lists yet" in out
    assert "taskflow new-list" in out
    assert "None" not in out
