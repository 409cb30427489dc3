"""
Text and HTML renderings of task lists.

Every piece of user-supplied text that ends up in markup goes through
escape_text first.
"""

import html
from typing import Iterable, List

from .schema import Task, TaskList, TaskStats
from .tasks import compute_stats, count_incomplete, sort_for_display


def escape_text(text: str) -> str:
    """Escape &, < and > so text is inert as element content. Quotes are kept."""
    return html.escape(text, quote=False)


def task_flags(task: Task) -> str:
    flags = []
    if task.priority:
        flags.append("⭐")
    if task.today:
        flags.append("📅")
    return " ".join(flags)


def format_task_line(task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    flags = task_flags(task)
    suffix = f" {flags}" if flags else ""
    return f"  {box} {task.text}{suffix}  (#{task.id})"


def progress_bar(stats: TaskStats, width: int = 10) -> str:
    filled = stats.completion_rate * width // 100
    return f"{'█' * filled}{'░' * (width - filled)} {stats.completion_rate}%"


def render_list_text(task_list: TaskList) -> str:
    stats = compute_stats(task_list.tasks)
    lines = [
        f"{task_list.icon} {task_list.name}  ({count_incomplete(task_list.tasks)} open)",
        f"Progress: {progress_bar(stats)}",
        "",
    ]
    tasks = sort_for_display(task_list.tasks)
    if not tasks:
        lines.append("  (no tasks)")
    lines.extend(format_task_line(t) for t in tasks)
    return "\n".join(lines)


def render_tasks_html(tasks: Iterable[Task]) -> str:
    items: List[str] = []
    for task in sort_for_display(tasks):
        classes = ["task"]
        if task.completed:
            classes.append("completed")
        if task.priority:
            classes.append("priority")
        if task.today:
            classes.append("today")
        items.append(
            f'  <li class="{" ".join(classes)}" data-id="{task.id}">'
            f"{escape_text(task.text)}</li>"
        )
    return "\n".join(["<ul>", *items, "</ul>"])


def render_list_html(task_list: TaskList) -> str:
    return "\n".join([
        f'<section class="task-list" data-id="{task_list.id}">',
        f"<h2>{escape_text(task_list.icon)} {escape_text(task_list.name)}</h2>",
        render_tasks_html(task_list.tasks),
        "</section>",
    ])
