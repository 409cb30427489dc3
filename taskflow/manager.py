"""
TASKFLOW - Task Manager
=======================
Owns the in-memory lists and is the only thing that writes them back.

Storage keys:
    taskLists   JSON array of lists (with their tasks)
    theme       "light" | "dark"

Author: TaskFlow contributors
"""

import logging
from typing import Any, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .schema import (
    IdGenerator, Task, TaskList, TaskStats, Theme,
    create_default_list, NEW_LIST_ICON
)
from .storage import StorageError, load_json
from . import render
from . import tasks as ops

logger = logging.getLogger(__name__)

LISTS_KEY = "taskLists"
THEME_KEY = "theme"

_lists_adapter = TypeAdapter(List[TaskList])


class TaskManager:
    """
    Task list manager

    Holds every list, applies the task rules from ``taskflow.tasks`` and
    persists after each change that actually applied. Rejected input and
    unknown ids return None/False and leave storage alone.
    """

    def __init__(self, storage: Any, ids: Optional[IdGenerator] = None):
        self.storage = storage
        self.ids = ids or IdGenerator()
        self.lists: List[TaskList] = self.load_lists()

    # ========================================
    # PERSISTENCE OPERATIONS
    # ========================================

    def load_lists(self) -> List[TaskList]:
        """Read persisted lists, falling back to the default list"""
        data = load_json(self.storage, LISTS_KEY)

        lists: Optional[List[TaskList]] = None
        if data is not None:
            try:
                lists = _lists_adapter.validate_python(data)
            except ValidationError as e:
                logger.warning(f"Stored task lists are invalid, using defaults: {e.error_count()} errors")

        # A stored empty array means the user deleted every list; keep it empty
        if lists is None:
            lists = [create_default_list()]

        for task_list in lists:
            self.ids.seed(task_list.id)
            for task in task_list.tasks:
                self.ids.seed(task.id)

        logger.debug(f"📂 Loaded {len(lists)} list(s)")
        return lists

    def save_lists(self) -> bool:
        """Write the whole collection; False if storage refused it"""
        payload = _lists_adapter.dump_json(self.lists, by_alias=True).decode("utf-8")
        try:
            self.storage.save(LISTS_KEY, payload)
        except StorageError as e:
            logger.error(f"Could not save task lists: {e}")
            return False
        return True

    def reset(self) -> None:
        """Wipe storage and start over with the default list"""
        try:
            self.storage.clear()
        except StorageError as e:
            logger.error(f"Could not clear storage: {e}")
            return
        self.lists = self.load_lists()
        logger.info("🧹 Reset all data")

    # ========================================
    # LIST OPERATIONS
    # ========================================

    def find_list(self, list_id: int) -> Optional[TaskList]:
        for task_list in self.lists:
            if task_list.id == list_id:
                return task_list
        return None

    def create_list(self, name: str, icon: str = NEW_LIST_ICON) -> Optional[TaskList]:
        clean = (name or "").strip()
        if not clean:
            return None

        task_list = TaskList(id=self.ids.next_id(), name=clean, icon=icon or NEW_LIST_ICON)
        self.lists.append(task_list)
        self.save_lists()

        logger.info(f"📋 Created list: {task_list.name} ({task_list.id})")
        return task_list

    def delete_list(self, list_id: int) -> bool:
        """Remove a list together with all of its tasks"""
        task_list = self.find_list(list_id)
        if not task_list:
            return False

        self.lists = [l for l in self.lists if l.id != list_id]
        self.save_lists()

        logger.info(f"🗑️ Deleted list: {task_list.name} ({len(task_list.tasks)} tasks)")
        return True

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add_task(self, list_id: int, text: str) -> Optional[Task]:
        task_list = self.find_list(list_id)
        if not task_list:
            return None

        task = ops.create_task(task_list, text, self.ids)
        if not task:
            return None

        self.save_lists()
        logger.info(f"➕ Added task {task.id} to {task_list.name}")
        return task

    def _apply(self, list_id: int, task_id: int, operation, *args) -> Optional[Task]:
        task_list = self.find_list(list_id)
        if not task_list:
            return None

        task = operation(task_list, task_id, *args)
        if task:
            self.save_lists()
        return task

    def toggle_completed(self, list_id: int, task_id: int) -> Optional[Task]:
        task = self._apply(list_id, task_id, ops.toggle_completed)
        if task:
            logger.info(f"{'✅' if task.completed else '↩️'} Task {task_id} completed={task.completed}")
        return task

    def toggle_priority(self, list_id: int, task_id: int) -> Optional[Task]:
        task = self._apply(list_id, task_id, ops.toggle_priority)
        if task:
            logger.info(f"⭐ Task {task_id} priority={task.priority}")
        return task

    def toggle_today(self, list_id: int, task_id: int) -> Optional[Task]:
        task = self._apply(list_id, task_id, ops.toggle_today)
        if task:
            logger.info(f"📅 Task {task_id} today={task.today}")
        return task

    def edit_task(self, list_id: int, task_id: int, text: str) -> Optional[Task]:
        task = self._apply(list_id, task_id, ops.edit_text, text)
        if task:
            logger.info(f"✏️ Edited task {task_id}")
        return task

    def delete_task(self, list_id: int, task_id: int) -> bool:
        task_list = self.find_list(list_id)
        if not task_list or not ops.delete_task(task_list, task_id):
            return False

        self.save_lists()
        logger.info(f"🗑️ Deleted task {task_id} from {task_list.name}")
        return True

    def locate_task(self, task_id: int) -> Optional[Tuple[TaskList, Task]]:
        """Find a task in whichever list holds it"""
        for task_list in self.lists:
            task = ops.find_task(task_list, task_id)
            if task:
                return task_list, task
        return None

    # ========================================
    # VIEWS & STATS
    # ========================================

    def all_tasks(self) -> List[Task]:
        return [task for task_list in self.lists for task in task_list.tasks]

    def today_tasks(self) -> List[Task]:
        return ops.sort_for_display(ops.filter_today(self.all_tasks()))

    def priority_tasks(self) -> List[Task]:
        return ops.sort_for_display(ops.filter_priority(self.all_tasks()))

    def stats(self, list_id: Optional[int] = None) -> TaskStats:
        """Stats for one list, or across every list when list_id is None"""
        if list_id is None:
            return ops.compute_stats(self.all_tasks())

        task_list = self.find_list(list_id)
        return ops.compute_stats(task_list.tasks if task_list else [])

    # ========================================
    # THEME
    # ========================================

    def get_theme(self) -> Theme:
        raw = self.storage.load(THEME_KEY)
        try:
            return Theme(raw)
        except ValueError:
            return Theme.LIGHT

    def set_theme(self, theme: Theme) -> Theme:
        theme = Theme(theme)
        try:
            self.storage.save(THEME_KEY, theme.value)
        except StorageError as e:
            logger.error(f"Could not save theme: {e}")
        return theme

    def toggle_theme(self) -> Theme:
        current = self.get_theme()
        return self.set_theme(Theme.DARK if current == Theme.LIGHT else Theme.LIGHT)

    # ========================================
    # REPORTING
    # ========================================

    def get_status_report(self, list_id: Optional[int] = None) -> str:
        """Human-readable view of one list, or of every list"""
        if list_id is not None:
            task_list = self.find_list(list_id)
            if not task_list:
                return f"List not found: {list_id}"
            return render.render_list_text(task_list)

        return "\n\n".join(render.render_list_text(l) for l in self.lists)
