# src/taskboard/tasks/task_models.py

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

MAX_TEXT_LENGTH = 250
MAX_CATEGORY_NAME_LENGTH = 20


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def _epoch_ms(raw: Any, fallback: int) -> int:
    # JSON allows Infinity/NaN; bools are ints but not timestamps.
    if isinstance(raw, bool) or not isinstance(raw, int | float) or not math.isfinite(raw):
        return fallback
    return int(raw)


class RepeatRule(StrEnum):
    """
    Recurrence label attached to a reminder.

    Descriptive only: nothing in the app materializes future occurrences.
    """

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    WEEKDAYS = "weekdays"

    @classmethod
    def from_raw(cls, raw: Any) -> RepeatRule:
        if not raw:
            return cls.NONE
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.NONE


@dataclass(slots=True)
class Task:
    id: str
    text: str
    created_at: int  # epoch ms

    completed: bool = False
    archived: bool = False
    completed_at: int | None = None

    description: str | None = None
    reminder: str | None = None  # ISO-8601, see reminders.py
    repeat: RepeatRule = RepeatRule.NONE
    category_id: str | None = None

    @property
    def is_repeating(self) -> bool:
        return self.repeat is not RepeatRule.NONE

    def to_dict(self) -> dict[str, Any]:
        """Persisted (camelCase) shape; absent optionals are omitted."""
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "archived": self.archived,
            "createdAt": self.created_at,
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        if self.description is not None:
            out["description"] = self.description
        if self.reminder is not None:
            out["reminder"] = self.reminder
        if self.repeat is not RepeatRule.NONE:
            out["repeat"] = self.repeat.value
        if self.category_id is not None:
            out["categoryId"] = self.category_id
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, fallback_created_at: int = 0) -> Task:
        """
        Lenient hydration from a persisted record.

        Keeps completed <=> completed_at consistent: a completed record without a
        timestamp gets its creation time, an incomplete one drops the timestamp.
        """
        created_at = _epoch_ms(data.get("createdAt"), fallback_created_at)

        completed = bool(data.get("completed", False))
        completed_at: int | None = None
        if completed:
            completed_at = _epoch_ms(data.get("completedAt"), created_at)

        description = data.get("description")
        reminder = data.get("reminder")
        category_id = data.get("categoryId")

        return cls(
            id=str(data.get("id", "")),
            text=str(data.get("text") or ""),
            created_at=created_at,
            completed=completed,
            archived=bool(data.get("archived", False)),
            completed_at=completed_at,
            description=str(description) if description else None,
            reminder=str(reminder) if reminder else None,
            repeat=RepeatRule.from_raw(data.get("repeat")),
            category_id=str(category_id) if category_id else None,
        )


@dataclass(slots=True)
class CategoryItem:
    id: str
    name: str
    color: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CategoryItem:
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            color=str(data.get("color") or ""),
        )


def validate_task_input(text: str, description: str | None = None) -> None:
    """
    Input rules enforced by the UI layer (the store accepts anything).

    Raises ValueError with a user-facing message.
    """
    if len(text) > MAX_TEXT_LENGTH:
        raise ValueError(f"Task text is limited to {MAX_TEXT_LENGTH} characters.")
    if not text.strip() and not (description or "").strip():
        raise ValueError("Task needs text or a description.")


def validate_category_name(name: str) -> None:
    if not name.strip():
        raise ValueError("Category name is required.")
    if len(name) > MAX_CATEGORY_NAME_LENGTH:
        raise ValueError(f"Category name is limited to {MAX_CATEGORY_NAME_LENGTH} characters.")
