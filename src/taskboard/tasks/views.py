# src/taskboard/tasks/views.py

"""
View pipeline: filter -> sort -> group.

Everything here is pure: (tasks, categories, mode, now) in, a fresh ordered
structure out. Input lists and Task objects are never mutated.

Modes:
- dates:      non-archived, grouped into overdue / due today / due soon / no due date
- recent:     non-archived, newest first
- categories: non-archived, grouped by category in the user's category order
- repeating:  non-archived tasks with a recurrence label, newest first
- archived:   archived tasks, newest first
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum

from .reminders import parse_reminder, to_local
from .task_models import CategoryItem, Task


class ViewMode(StrEnum):
    DATES = "dates"
    RECENT = "recent"
    CATEGORIES = "categories"
    REPEATING = "repeating"
    ARCHIVED = "archived"


@dataclass(slots=True)
class DateGroups:
    overdue: list[Task] = field(default_factory=list)
    due_today: list[Task] = field(default_factory=list)
    due_soon: list[Task] = field(default_factory=list)
    no_due_date: list[Task] = field(default_factory=list)

    def sections(self) -> list[tuple[str, list[Task]]]:
        return [
            ("Overdue", self.overdue),
            ("Due today", self.due_today),
            ("Due soon", self.due_soon),
            ("No due date", self.no_due_date),
        ]


@dataclass(slots=True)
class CategoryGroup:
    category: CategoryItem | None  # None = uncategorized
    tasks: list[Task] = field(default_factory=list)


ViewResult = list[Task] | DateGroups | list[CategoryGroup]


def _reminder_ts(task: Task) -> float | None:
    dt = parse_reminder(task.reminder)
    if dt is None:
        return None
    try:
        return dt.timestamp()
    except (OverflowError, OSError):
        return None


# ---- filter ----


def filter_tasks(tasks: Iterable[Task], mode: ViewMode) -> list[Task]:
    if mode is ViewMode.ARCHIVED:
        return [t for t in tasks if t.archived]
    if mode is ViewMode.REPEATING:
        return [t for t in tasks if not t.archived and t.is_repeating]
    return [t for t in tasks if not t.archived]


# ---- sort ----


def _dates_key(task: Task) -> tuple[bool, bool, float, int]:
    ts = _reminder_ts(task)
    completed_desc = -(task.completed_at or 0) if task.completed else 0
    return (task.completed, ts is None, ts or 0.0, completed_desc)


def _category_index(categories: Sequence[CategoryItem]) -> dict[str, int]:
    return {c.id: i for i, c in enumerate(categories)}


def sort_tasks(tasks: Iterable[Task], categories: Sequence[CategoryItem], mode: ViewMode) -> list[Task]:
    """
    Order tasks for a mode.

    All modes except categories put incomplete tasks before completed ones.
    In categories mode the completion split happens inside each category.
    """
    if mode is ViewMode.DATES:
        return sorted(tasks, key=_dates_key)

    if mode is ViewMode.CATEGORIES:
        index = _category_index(categories)
        missing = len(categories)
        return sorted(
            tasks,
            key=lambda t: (
                index.get(t.category_id or "", missing),
                t.completed,
                -t.created_at,
            ),
        )

    # recent / repeating / archived
    return sorted(tasks, key=lambda t: (t.completed, -t.created_at))


# ---- group ----


def start_of_day(now: datetime) -> datetime:
    return to_local(now).replace(hour=0, minute=0, second=0, microsecond=0)


def group_by_date(tasks: Iterable[Task], now: datetime) -> DateGroups:
    day_start = start_of_day(now).timestamp()
    day_end = (start_of_day(now) + timedelta(days=1)).timestamp()

    groups = DateGroups()
    for task in tasks:
        ts = _reminder_ts(task)
        if ts is None:
            groups.no_due_date.append(task)
        elif ts < day_start:
            groups.overdue.append(task)
        elif ts < day_end:
            groups.due_today.append(task)
        else:
            groups.due_soon.append(task)

    def by_reminder(t: Task) -> tuple[float, int]:
        return (_reminder_ts(t) or 0.0, t.created_at)

    groups.overdue.sort(key=by_reminder)
    groups.due_today.sort(key=by_reminder)
    groups.due_soon.sort(key=by_reminder)
    groups.no_due_date.sort(key=lambda t: t.created_at)
    return groups


def group_by_category(tasks: Iterable[Task], categories: Sequence[CategoryItem]) -> list[CategoryGroup]:
    """
    One group per category in positional order (empty ones included), then a
    trailing uncategorized group if any task has no known category.
    Task order inside a group follows the input order.
    """
    groups = [CategoryGroup(category=c) for c in categories]
    by_id = {g.category.id: g for g in groups if g.category is not None}
    uncategorized = CategoryGroup(category=None)

    for task in tasks:
        group = by_id.get(task.category_id) if task.category_id is not None else None
        (group or uncategorized).tasks.append(task)

    if uncategorized.tasks:
        groups.append(uncategorized)
    return groups


# ---- pipeline ----


def derive_view(
    tasks: Iterable[Task],
    categories: Sequence[CategoryItem],
    mode: ViewMode | str,
    now: datetime,
) -> ViewResult:
    mode = ViewMode(mode)
    ordered = sort_tasks(filter_tasks(tasks, mode), categories, mode)

    if mode is ViewMode.DATES:
        return group_by_date(ordered, now)
    if mode is ViewMode.CATEGORIES:
        return group_by_category(ordered, categories)
    return ordered
