# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.state import AppState
from taskboard.tasks.backing import InMemoryBacking, JsonFileBacking
from taskboard.tasks.task_store import TaskStore

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    A SimpleNamespace rather than the real config keeps tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path / "data",
        storage_key="text-storage",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def backing() -> InMemoryBacking:
    return InMemoryBacking()


@pytest.fixture()
def store(backing: InMemoryBacking, clock: FakeClock, ids: SequentialIds) -> TaskStore:
    return TaskStore(backing, clock=clock, id_factory=ids)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock, ids: SequentialIds) -> AppState:
    """
    AppState wired with a real JSON file backing under tmp_path.

    The file backing is part of what we want to test, so it is not faked here.
    """
    backing = JsonFileBacking(settings.data_dir, key=settings.storage_key)
    return AppState(settings=settings, store=TaskStore(backing, clock=clock, id_factory=ids))
