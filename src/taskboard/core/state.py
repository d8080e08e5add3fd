# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_store import TaskStore
from ..tasks.views import ViewMode


@dataclass
class AppState:
    # Settings object (config.Settings or a compatible namespace in tests).
    settings: object

    store: TaskStore

    # UI-only: last view shown by the console; never persisted.
    view_mode: ViewMode = ViewMode.DATES
    last_listed: list[str] = field(default_factory=list)
