# tests/fakes.py

from __future__ import annotations

from datetime import date

from taskflow.schema import Task
from taskflow.storage import MemoryStorage, StorageError

FIXED_DAY = date(2024, 3, 15)


class FakeClock:
    """Frozen epoch clock; ids drawn from it only advance via the generator's bump."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeDay:
    """Settable replacement for date.today."""

    def __init__(self, day: date = FIXED_DAY) -> None:
        self.day = day

    def __call__(self) -> date:
        return self.day


class FailingStorage(MemoryStorage):
    """Reads work, every write fails."""

    def save(self, key: str, value: str) -> None:
        raise StorageError("disk full")


def make_task(task_id: int, **flags: bool) -> Task:
    return Task(id=task_id, text=f"task {task_id}", **flags)
