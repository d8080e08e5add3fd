# tests/test_views.py

from __future__ import annotations

from datetime import timedelta

import pytest

from taskboard.tasks.task_models import CategoryItem, RepeatRule, Task
from taskboard.tasks.views import (
    CategoryGroup,
    DateGroups,
    ViewMode,
    derive_view,
    filter_tasks,
    sort_tasks,
)

from .fakes import local

NOW = local(2026, 10, 16, 15, 0, 0)


def _task(tid: str, created_at: int, **kw) -> Task:
    if kw.get("completed") and "completed_at" not in kw:
        kw["completed_at"] = created_at + 1
    return Task(id=tid, text=tid, created_at=created_at, **kw)


def _ids(tasks: list[Task]) -> list[str]:
    return [t.id for t in tasks]


def test_filter_stage_per_mode() -> None:
    tasks = [
        _task("plain", 1),
        _task("arch", 2, archived=True),
        _task("rep", 3, repeat=RepeatRule.DAILY, reminder=NOW.isoformat()),
        _task("rep-arch", 4, repeat=RepeatRule.WEEKLY, archived=True),
    ]

    assert _ids(filter_tasks(tasks, ViewMode.ARCHIVED)) == ["arch", "rep-arch"]
    assert _ids(filter_tasks(tasks, ViewMode.REPEATING)) == ["rep"]
    for mode in (ViewMode.DATES, ViewMode.RECENT, ViewMode.CATEGORIES):
        assert _ids(filter_tasks(tasks, mode)) == ["plain", "rep"]


def test_recent_mode_partitions_then_newest_first() -> None:
    tasks = [
        _task("id1", 100),
        _task("id2", 200, completed=True),
        _task("id3", 300),
    ]

    view = derive_view(tasks, [], ViewMode.RECENT, NOW)

    assert _ids(view) == ["id3", "id1", "id2"]


def test_repeating_and_archived_modes_are_flat_and_newest_first() -> None:
    tasks = [
        _task("r1", 10, repeat=RepeatRule.DAILY),
        _task("r2", 20, repeat=RepeatRule.MONTHLY, completed=True),
        _task("r3", 30, repeat=RepeatRule.WEEKDAYS),
        _task("a1", 40, archived=True, completed=True),
        _task("a2", 50, archived=True),
    ]

    assert _ids(derive_view(tasks, [], ViewMode.REPEATING, NOW)) == ["r3", "r1", "r2"]
    assert _ids(derive_view(tasks, [], ViewMode.ARCHIVED, NOW)) == ["a2", "a1"]


def test_dates_sort_stage_orders_by_reminder_then_missing() -> None:
    tasks = [
        _task("none", 1),
        _task("late", 2, reminder=(NOW + timedelta(days=3)).isoformat()),
        _task("soon", 3, reminder=(NOW + timedelta(hours=2)).isoformat()),
        _task("done-old", 4, reminder=NOW.isoformat(), completed=True, completed_at=10),
        _task("done-new", 5, reminder=NOW.isoformat(), completed=True, completed_at=20),
    ]

    ordered = sort_tasks(tasks, [], ViewMode.DATES)

    assert _ids(ordered) == ["soon", "late", "none", "done-new", "done-old"]


def test_dates_mode_groups_relative_to_start_of_today() -> None:
    yesterday_10 = local(2026, 10, 15, 10, 0, 0)
    today_08 = local(2026, 10, 16, 8, 0, 0)
    tomorrow_09 = local(2026, 10, 17, 9, 0, 0)
    tasks = [
        _task("y", 1, reminder=yesterday_10.isoformat()),
        _task("t", 2, reminder=today_08.isoformat()),
        _task("m", 3, reminder=tomorrow_09.isoformat()),
        _task("n", 4),
    ]

    view = derive_view(tasks, [], ViewMode.DATES, NOW)

    assert isinstance(view, DateGroups)
    assert _ids(view.overdue) == ["y"]
    # 08:00 already passed at 15:00 but is still "today", not overdue.
    assert _ids(view.due_today) == ["t"]
    assert _ids(view.due_soon) == ["m"]
    assert _ids(view.no_due_date) == ["n"]


def test_dates_buckets_order_by_reminder_then_creation() -> None:
    same = local(2026, 10, 16, 18, 0, 0).isoformat()
    earlier = local(2026, 10, 16, 17, 0, 0).isoformat()
    tasks = [
        _task("b", 20, reminder=same),
        _task("a", 10, reminder=same),
        _task("c", 30, reminder=earlier, completed=True),
        _task("n2", 50),
        _task("n1", 40, completed=True),
    ]

    view = derive_view(tasks, [], ViewMode.DATES, NOW)

    assert isinstance(view, DateGroups)
    assert _ids(view.due_today) == ["c", "a", "b"]
    assert _ids(view.no_due_date) == ["n1", "n2"]


def test_unparseable_reminder_counts_as_no_due_date() -> None:
    view = derive_view([_task("x", 1, reminder="someday")], [], ViewMode.DATES, NOW)

    assert isinstance(view, DateGroups)
    assert _ids(view.no_due_date) == ["x"]


def test_categories_mode_groups_in_category_order_with_trailing_uncategorized() -> None:
    cats = [
        CategoryItem(id="home", name="Home", color="#1"),
        CategoryItem(id="work", name="Work", color="#2"),
        CategoryItem(id="empty", name="Empty", color="#3"),
    ]
    tasks = [
        _task("w-old", 1, category_id="work"),
        _task("w-done", 5, category_id="work", completed=True),
        _task("w-new", 3, category_id="work"),
        _task("h", 2, category_id="home"),
        _task("loose", 4),
        _task("orphan", 6, category_id="deleted"),
        _task("archived", 7, category_id="home", archived=True),
    ]

    view = derive_view(tasks, cats, ViewMode.CATEGORIES, NOW)

    assert isinstance(view, list)
    assert all(isinstance(g, CategoryGroup) for g in view)
    names = [g.category.name if g.category else None for g in view]
    assert names == ["Home", "Work", "Empty", None]
    assert _ids(view[0].tasks) == ["h"]
    assert _ids(view[1].tasks) == ["w-new", "w-old", "w-done"]
    assert view[2].tasks == []
    assert _ids(view[3].tasks) == ["orphan", "loose"]


def test_categories_mode_without_uncategorized_tasks_has_no_trailing_group() -> None:
    cats = [CategoryItem(id="home", name="Home", color="#1")]
    view = derive_view([_task("h", 1, category_id="home")], cats, ViewMode.CATEGORIES, NOW)

    assert [g.category.id if g.category else None for g in view] == ["home"]


def test_derive_view_does_not_mutate_inputs() -> None:
    tasks = [_task("a", 1), _task("b", 2, completed=True), _task("c", 3)]
    snapshot = [t.to_dict() for t in tasks]

    derive_view(tasks, [], "recent", NOW)
    derive_view(tasks, [], "dates", NOW)

    assert _ids(tasks) == ["a", "b", "c"]
    assert [t.to_dict() for t in tasks] == snapshot


@pytest.mark.parametrize("reminder", ["0001-01-01T00:00:00+14:00", "9999-12-31T23:59:00-14:00"])
def test_reminder_outside_datetime_range_counts_as_no_due_date(reminder: str) -> None:
    tasks = [_task("edge", 1, reminder=reminder), _task("ok", 2, reminder=NOW.isoformat())]

    view = derive_view(tasks, [], ViewMode.DATES, NOW)

    assert isinstance(view, DateGroups)
    assert _ids(view.no_due_date) == ["edge"]
    assert _ids(view.due_today) == ["ok"]
