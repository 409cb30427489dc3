# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskflow.manager import TaskManager
from taskflow.schema import IdGenerator, TaskList
from taskflow.storage import FileStorage, MemoryStorage

from .fakes import FakeClock, FakeDay


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def file_storage(tmp_path: Path) -> FileStorage:
    return FileStorage(tmp_path / "data")


@pytest.fixture()
def ids() -> IdGenerator:
    return IdGenerator(clock=FakeClock())


@pytest.fixture()
def today() -> FakeDay:
    return FakeDay()


@pytest.fixture()
def manager(storage: MemoryStorage, ids: IdGenerator) -> TaskManager:
    return TaskManager(storage, ids=ids)


@pytest.fixture()
def empty_list() -> TaskList:
    return TaskList(id=1, name="Personal")
