# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on these Protocols instead of concrete implementations,
so the backing medium (JSON file, memory, anything key-value) stays swappable.
"""

from collections.abc import Callable
from typing import Any, Protocol

Document = dict[str, Any]
# {"version": int, "state": {"savedTexts": [...], "categories": [...]}}

Clock = Callable[[], int]
# Returns "now" as epoch milliseconds.

IdFactory = Callable[[], str]


class KeyValueBacking(Protocol):
    """Synchronous blob store holding one persisted document under a fixed key."""

    def load(self) -> Document | None: ...

    def save(self, document: Document) -> None: ...
