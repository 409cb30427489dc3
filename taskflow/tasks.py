"""
TASKFLOW - Task Operations
==========================
Pure rules over a single list's tasks: create, toggle, edit, delete,
display ordering, smart-view filters and completion statistics.

Nothing here persists; TaskManager owns that.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .schema import IdGenerator, Task, TaskList, TaskStats

logger = logging.getLogger(__name__)

SortKey = Tuple[Callable[[Task], bool], bool]


def _is_completed(task: Task) -> bool:
    return task.completed


def _open_priority(task: Task) -> bool:
    return task.priority and not task.completed


def _open_today(task: Task) -> bool:
    return task.today and not task.completed


# (key, descending) pairs, most significant first.
# Completed tasks sink and keep their input order; among open tasks
# priority, then today, float up.
DISPLAY_ORDER: Tuple[SortKey, ...] = (
    (_is_completed, False),
    (_open_priority, True),
    (_open_today, True),
)


# ========================================
# CRUD
# ========================================

def find_task(task_list: TaskList, task_id: int) -> Optional[Task]:
    for task in task_list.tasks:
        if task.id == task_id:
            return task
    return None


def create_task(task_list: TaskList, text: str, ids: IdGenerator) -> Optional[Task]:
    """Append a new task; None (and no change) for blank text"""
    clean = (text or "").strip()
    if not clean:
        return None

    task = Task(
        id=ids.next_id(),
        text=clean,
        created_at=datetime.now(timezone.utc),
    )
    task_list.tasks.append(task)
    return task


def _toggle(task_list: TaskList, task_id: int, field: str) -> Optional[Task]:
    task = find_task(task_list, task_id)
    if not task:
        logger.debug(f"Toggle {field}: no task {task_id} in list {task_list.id}")
        return None
    setattr(task, field, not getattr(task, field))
    return task


def toggle_completed(task_list: TaskList, task_id: int) -> Optional[Task]:
    return _toggle(task_list, task_id, "completed")


def toggle_priority(task_list: TaskList, task_id: int) -> Optional[Task]:
    return _toggle(task_list, task_id, "priority")


def toggle_today(task_list: TaskList, task_id: int) -> Optional[Task]:
    return _toggle(task_list, task_id, "today")


def edit_text(task_list: TaskList, task_id: int, new_text: str) -> Optional[Task]:
    """Replace a task's text; blank text is rejected and the task is untouched"""
    clean = (new_text or "").strip()
    if not clean:
        return None

    task = find_task(task_list, task_id)
    if not task:
        return None
    task.text = clean
    return task


def delete_task(task_list: TaskList, task_id: int) -> bool:
    remaining = [t for t in task_list.tasks if t.id != task_id]
    if len(remaining) == len(task_list.tasks):
        return False
    task_list.tasks = remaining
    return True


# ========================================
# ORDERING & VIEWS
# ========================================

def sort_for_display(
    tasks: Iterable[Task],
    order: Sequence[SortKey] = DISPLAY_ORDER
) -> List[Task]:
    """
    Multi-key stable sort.

    Applies one stable sort per key, least significant first, so ties on
    every key keep their input order.
    """
    result = list(tasks)
    for key, descending in reversed(order):
        result.sort(key=key, reverse=descending)
    return result


def filter_today(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.today and not t.completed]


def filter_priority(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.priority and not t.completed]


def count_incomplete(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)


# ========================================
# STATISTICS
# ========================================

def completion_rate(completed: int, total: int) -> int:
    """Whole percent, rounding halves up"""
    if total <= 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)

    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        completion_rate=completion_rate(completed, total),
    )
