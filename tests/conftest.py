from __future__ import annotations

import pytest

from taskops.db import dispose_engine
from taskops.tasks_repo import TaskStore

from fakes import NOW, FakeTaskStore


@pytest.fixture()
def clock():
    return lambda: NOW


@pytest.fixture()
def fake_store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def sqlite_store(tmp_path):
    """A real TaskStore on a throwaway SQLite file."""
    url = f"sqlite:///{(tmp_path / 'tasks.db').as_posix()}"
    store = TaskStore(url)
    store.init_schema()
    yield store
    dispose_engine(url)
