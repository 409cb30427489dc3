#!/usr/bin/env python3
"""
TASKFLOW - CLI Interface
========================
Command-line tool for managing task lists and running the Pomodoro timer.

Usage:
    taskflow lists
    taskflow new-list Work --icon 💼
    taskflow add "Write report" --list 1
    taskflow done 1718000000000
    taskflow show --view today
    taskflow stats
    taskflow pomodoro

Author: TaskFlow contributors
"""

import argparse
import json
import logging
import sys
import threading
from datetime import date
from typing import List, Optional

from .manager import TaskManager
from .pomodoro import PomodoroTimer, load_daily_count
from .render import format_task_line, render_list_html
from .schema import Theme, TaskList
from .storage import FileStorage

DEFAULT_DIR = ".taskflow"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskflow",
        description="TaskFlow - personal task lists with a Pomodoro timer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taskflow new-list Work --icon 💼     Create a list
  taskflow add "Buy milk"              Add a task to the first list
  taskflow add "Ship it" --list 42     Add a task to list 42
  taskflow done 1718000000000          Toggle a task's completion
  taskflow priority 1718000000000      Toggle a task's priority flag
  taskflow show --view priority        Open priority tasks across lists
  taskflow theme toggle                Switch light/dark
  taskflow pomodoro --cycles 4         Run four work/break cycles
        """
    )
    parser.add_argument("--dir", default=DEFAULT_DIR, help="Data directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # LIST commands
    subparsers.add_parser("lists", help="Show all lists")

    new_list_parser = subparsers.add_parser("new-list", help="Create a list")
    new_list_parser.add_argument("name", help="List name")
    new_list_parser.add_argument("--icon", default=None, help="Display glyph")

    delete_list_parser = subparsers.add_parser("delete-list", help="Delete a list and its tasks")
    delete_list_parser.add_argument("list_id", type=int, help="List ID")

    # TASK commands
    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("text", help="Task text")
    add_parser.add_argument("--list", dest="list_id", type=int, help="List ID (default: first list)")

    for name, help_text in (
        ("done", "Toggle task completion"),
        ("priority", "Toggle task priority"),
        ("today", "Toggle task 'today' flag"),
        ("delete", "Delete a task"),
    ):
        toggle_parser = subparsers.add_parser(name, help=help_text)
        toggle_parser.add_argument("task_id", type=int, help="Task ID")

    edit_parser = subparsers.add_parser("edit", help="Change a task's text")
    edit_parser.add_argument("task_id", type=int, help="Task ID")
    edit_parser.add_argument("text", help="New text")

    # VIEW commands
    show_parser = subparsers.add_parser("show", help="Show tasks")
    show_parser.add_argument("--list", dest="list_id", type=int, help="List ID (default: all lists)")
    show_parser.add_argument("--view", choices=["all", "today", "priority"], default="all")
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    stats_parser = subparsers.add_parser("stats", help="Completion statistics")
    stats_parser.add_argument("--list", dest="list_id", type=int, help="List ID (default: all lists)")
    stats_parser.add_argument("--json", action="store_true", help="Output as JSON")

    export_parser = subparsers.add_parser("export-html", help="Print lists as HTML")
    export_parser.add_argument("--list", dest="list_id", type=int, help="List ID (default: all lists)")

    theme_parser = subparsers.add_parser("theme", help="Show or change the theme")
    theme_parser.add_argument("value", nargs="?", choices=["light", "dark", "toggle"])

    # POMODORO
    pomodoro_parser = subparsers.add_parser("pomodoro", help="Run the Pomodoro timer")
    pomodoro_parser.add_argument("--count", action="store_true", help="Only print today's session count")
    pomodoro_parser.add_argument("--cycles", type=int, default=1, help="Work/break cycles to run")
    pomodoro_parser.add_argument("--work", type=int, default=25, help="Work minutes")
    pomodoro_parser.add_argument("--break", dest="break_minutes", type=int, default=5, help="Break minutes")

    subparsers.add_parser("reset", help="Delete all stored data")

    return parser


def _default_list(manager: TaskManager, list_id: Optional[int]) -> Optional[TaskList]:
    if list_id is not None:
        return manager.find_list(list_id)
    return manager.lists[0] if manager.lists else None


def _selected_lists(manager: TaskManager, list_id: Optional[int]) -> Optional[List[TaskList]]:
    if list_id is None:
        return manager.lists
    task_list = manager.find_list(list_id)
    return [task_list] if task_list else None


def run_pomodoro(storage, cycles: int, work_minutes: int, break_minutes: int) -> int:
    finished = threading.Event()
    completed_cycles = [0]

    def on_phase_change(timer: PomodoroTimer) -> None:
        if timer.is_break:
            print(f"\n🍅 Work session done ({timer.daily_count} today). Break time!")
        else:
            completed_cycles[0] += 1
            print("\n▶️ Back to work.")
            if completed_cycles[0] >= cycles:
                finished.set()

    timer = PomodoroTimer(
        storage,
        work_duration=work_minutes * 60,
        break_duration=break_minutes * 60,
        on_phase_change=on_phase_change,
    )
    timer.start()
    try:
        while not finished.wait(timer.tick_seconds):
            label = "Break" if timer.is_break else "Work"
            print(f"\r{label} {timer.display} ({timer.progress_percent:5.1f}%)", end="", flush=True)
    except KeyboardInterrupt:
        print("\n⏸️ Stopped.")
    finally:
        timer.pause()

    print(f"Sessions today: {timer.daily_count}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    storage = FileStorage(args.dir)

    if args.command == "pomodoro":
        if args.count:
            print(f"🍅 Sessions today: {load_daily_count(storage, date.today())}")
            return 0
        return run_pomodoro(storage, max(1, args.cycles), args.work, args.break_minutes)

    manager = TaskManager(storage)

    # Execute command
    if args.command == "lists":
        if not manager.lists:
            print("No lists. Create one with: taskflow new-list NAME")
            return 0
        print("📋 Lists:")
        print("-" * 60)
        for tl in manager.lists:
            stats = manager.stats(tl.id)
            print(f"  [{tl.id}] {tl.icon} {tl.name}  {stats.pending} open / {stats.total} total")
        print("-" * 60)

    elif args.command == "new-list":
        task_list = manager.create_list(args.name, args.icon)
        if not task_list:
            print("❌ List name cannot be empty")
            return 1
        print(f"✅ Created: [{task_list.id}] {task_list.icon} {task_list.name}")

    elif args.command == "delete-list":
        if not manager.delete_list(args.list_id):
            print(f"❌ List not found: {args.list_id}")
            return 1
        print(f"🗑️ Deleted list {args.list_id}")

    elif args.command == "add":
        if args.list_id is None and not manager.lists:
            print("❌ No lists yet. Create one with: taskflow new-list NAME")
            return 1
        task_list = _default_list(manager, args.list_id)
        if not task_list:
            print(f"❌ List not found: {args.list_id}")
            return 1
        task = manager.add_task(task_list.id, args.text)
        if not task:
            print("❌ Task text cannot be empty")
            return 1
        print(f"✅ Added to {task_list.name}: {task.text} (#{task.id})")

    elif args.command in ("done", "priority", "today", "delete", "edit"):
        located = manager.locate_task(args.task_id)
        if not located:
            print(f"❌ Task not found: {args.task_id}")
            return 1
        task_list, _ = located

        if args.command == "delete":
            manager.delete_task(task_list.id, args.task_id)
            print(f"🗑️ Deleted task {args.task_id}")
            return 0

        if args.command == "edit":
            task = manager.edit_task(task_list.id, args.task_id, args.text)
            if not task:
                print("❌ Task text cannot be empty")
                return 1
        elif args.command == "done":
            task = manager.toggle_completed(task_list.id, args.task_id)
        elif args.command == "priority":
            task = manager.toggle_priority(task_list.id, args.task_id)
        else:
            task = manager.toggle_today(task_list.id, args.task_id)
        print(format_task_line(task).strip())

    elif args.command == "show":
        if args.view == "today":
            tasks = manager.today_tasks()
        elif args.view == "priority":
            tasks = manager.priority_tasks()
        else:
            tasks = None

        if tasks is not None:
            if args.json:
                print(json.dumps([t.model_dump(mode="json", by_alias=True) for t in tasks], indent=2, ensure_ascii=False))
            elif not tasks:
                print(f"Nothing open for view: {args.view}")
            else:
                for task in tasks:
                    print(format_task_line(task))
            return 0

        lists = _selected_lists(manager, args.list_id)
        if lists is None:
            print(f"❌ List not found: {args.list_id}")
            return 1
        if args.json:
            print(json.dumps([l.model_dump(mode="json", by_alias=True) for l in lists], indent=2, ensure_ascii=False))
        elif args.list_id is not None:
            print(manager.get_status_report(args.list_id))
        else:
            print(manager.get_status_report())

    elif args.command == "stats":
        if args.list_id is not None and not manager.find_list(args.list_id):
            print(f"❌ List not found: {args.list_id}")
            return 1
        stats = manager.stats(args.list_id)
        if args.json:
            print(json.dumps(stats.model_dump(), indent=2))
        else:
            print(f"Total: {stats.total}")
            print(f"Completed: {stats.completed}")
            print(f"Pending: {stats.pending}")
            print(f"Completion: {stats.completion_rate}%")

    elif args.command == "export-html":
        lists = _selected_lists(manager, args.list_id)
        if lists is None:
            print(f"❌ List not found: {args.list_id}")
            return 1
        print("\n".join(render_list_html(l) for l in lists))

    elif args.command == "theme":
        if args.value == "toggle":
            theme = manager.toggle_theme()
        elif args.value:
            theme = manager.set_theme(Theme(args.value))
        else:
            theme = manager.get_theme()
        print(f"Theme: {theme.value}")

    elif args.command == "reset":
        manager.reset()
        print("🧹 All data cleared")

    return 0


if __name__ == "__main__":
    sys.exit(main())
