# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist.persistence import JsonFileStorage, TaskPersistence
from tasklist.task_store import TaskStore

from .fakes import FakeClock, FakePersistence


@pytest.fixture()
def storage(tmp_path: Path) -> JsonFileStorage:
    return JsonFileStorage(str(tmp_path / "tasks.json"))


@pytest.fixture()
def persistence(storage: JsonFileStorage) -> TaskPersistence:
    return TaskPersistence(storage)


@pytest.fixture()
def fake_persistence() -> FakePersistence:
    return FakePersistence()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(fake_persistence: FakePersistence, clock: FakeClock) -> TaskStore:
    """Empty store backed by the in-memory adapter."""
    task_store = TaskStore(fake_persistence, clock=clock)
    task_store.load()
    return task_store
