"""
TASKFLOW - Personal Task Manager
================================

Named task lists with priority/today flags, completion stats and a
Pomodoro timer. State lives in a local key-value store.

Usage:
    from taskflow import TaskManager, FileStorage

    manager = TaskManager(FileStorage(".taskflow"))
    work = manager.create_list("Work", "💼")
    task = manager.add_task(work.id, "Write report")
    manager.toggle_priority(work.id, task.id)

    print(manager.get_status_report(work.id))
    print(manager.stats())

Author: TaskFlow contributors
"""

from .schema import (
    Task,
    TaskList,
    TaskStats,
    Theme,
    PomodoroRecord,
    IdGenerator,
    create_default_list
)

from .storage import FileStorage, MemoryStorage, StorageError, TaskFlowError
from .manager import TaskManager
from .pomodoro import PomodoroTimer, Ticker, format_time, load_daily_count
from .render import escape_text

__version__ = "1.0.0"
__all__ = [
    "TaskManager",
    "Task",
    "TaskList",
    "TaskStats",
    "Theme",
    "PomodoroRecord",
    "IdGenerator",
    "create_default_list",
    "FileStorage",
    "MemoryStorage",
    "StorageError",
    "TaskFlowError",
    "PomodoroTimer",
    "Ticker",
    "format_time",
    "load_daily_count",
    "escape_text"
]
