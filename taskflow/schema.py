"""
TASKFLOW - Schema Definition
============================
Tasks, lists, statistics and the persisted Pomodoro record.

Field names on disk follow the existing storage format (``createdAt``),
so every model serializes with ``by_alias=True``.

Author: TaskFlow contributors
"""

from enum import Enum
from typing import Callable, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator
import time


DEFAULT_LIST_ID = 1
DEFAULT_LIST_NAME = "Personal"
DEFAULT_LIST_ICON = "🏠"
NEW_LIST_ICON = "📋"


class Theme(str, Enum):
    """Display theme"""
    LIGHT = "light"
    DARK = "dark"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class Task(BaseModel):
    """Single actionable item"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    text: str = Field(min_length=1)
    completed: bool = False
    priority: bool = False
    today: bool = False          # Scheduled for today, independent of completion
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class TaskList(BaseModel):
    """Named, ordered collection of tasks"""
    id: int
    name: str = Field(min_length=1)
    icon: str = NEW_LIST_ICON

    # Insertion order is display order before sorting
    tasks: List[Task] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class TaskStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    completion_rate: int = 0     # Whole percent, 0-100


class PomodoroRecord(BaseModel):
    """Completed work sessions for one calendar day"""
    date: str                    # Day key, YYYY-MM-DD
    count: int = Field(ge=0, default=0)


def create_default_list() -> TaskList:
    """List synthesized when nothing has been persisted yet"""
    return TaskList(
        id=DEFAULT_LIST_ID,
        name=DEFAULT_LIST_NAME,
        icon=DEFAULT_LIST_ICON,
    )


class IdGenerator:
    """
    Timestamp-ordered ids that never repeat.

    Ids are epoch milliseconds, bumped past the last issued id when two
    requests land in the same millisecond.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, last_id: int = 0):
        self._clock = clock or time.time
        self._last_id = last_id

    @property
    def last_id(self) -> int:
        return self._last_id

    def seed(self, existing_id: int) -> None:
        """Make sure future ids exceed an id already in use"""
        if existing_id > self._last_id:
            self._last_id = existing_id

    def next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id
