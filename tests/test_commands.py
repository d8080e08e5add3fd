# tests/test_commands.py

from __future__ import annotations

from datetime import date

import pytest

from taskboard.cli.commands import CommandRegistry, parse_task_args, registry
from taskboard.tasks.reminders import is_time_set, parse_reminder
from taskboard.tasks.task_models import RepeatRule


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return f"a:{','.join(args)}"

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(state, "/a x y") == "a:x,y"
    assert reg.handle(state, "/ALPHA z") == "a:z"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_parse_task_args_tokens() -> None:
    today = date(2026, 10, 16)
    text, reminder, repeat, description = parse_task_args(
        "Pay rent due:2026-11-01 every:monthly // transfer from savings".split(), today
    )

    assert text == "Pay rent"
    assert description == "transfer from savings"
    assert repeat is RepeatRule.MONTHLY
    assert reminder is not None
    assert is_time_set(reminder) is False
    dt = parse_reminder(reminder)
    assert dt is not None and dt.date() == date(2026, 11, 1)


def test_parse_task_args_time_without_date_means_today() -> None:
    today = date(2026, 10, 16)
    _, reminder, _, _ = parse_task_args(["Call", "at:17:45"], today)

    dt = parse_reminder(reminder)
    assert dt is not None
    assert (dt.date(), dt.hour, dt.minute, dt.second) == (today, 17, 45, 0)


def test_parse_task_args_drops_repeat_without_reminder() -> None:
    text, reminder, repeat, description = parse_task_args(["Floss", "every:daily"], date(2026, 10, 16))
    assert (text, reminder, repeat, description) == ("Floss", None, RepeatRule.NONE, None)


def test_parse_task_args_line_may_start_with_description() -> None:
    text, _, _, description = parse_task_args(["//", "only", "notes"], date(2026, 10, 16))
    assert (text, description) == ("", "only notes")


def test_parse_task_args_rejects_bad_tokens() -> None:
    with pytest.raises(ValueError):
        parse_task_args(["x", "due:someday"], date(2026, 10, 16))
    with pytest.raises(ValueError):
        parse_task_args(["x", "at:25:99"], date(2026, 10, 16))
    with pytest.raises(ValueError):
        parse_task_args(["x", "due:today", "every:hourly"], date(2026, 10, 16))


def test_add_with_hashtag_then_list_by_category(state) -> None:
    reply = registry.handle(state, "/add Buy milk #shopping")
    assert reply is not None and "Buy milk" in reply

    task = state.store.tasks[0]
    shopping = next(c for c in state.store.categories if c.name == "Shopping")
    assert task.text == "Buy milk"
    assert task.category_id == shopping.id

    listing = registry.handle(state, "/view categories")
    assert listing is not None
    assert "-- Shopping --" in listing
    assert "Buy milk" in listing
    assert state.last_listed == [task.id]


def test_add_rejects_empty_and_too_long_text(state) -> None:
    assert "needs text" in (registry.handle(state, "/add due:today") or "")
    assert "250" in (registry.handle(state, "/add " + "x" * 251) or "")
    assert state.store.tasks == []


def test_hashtag_only_task_needs_a_description(state) -> None:
    assert "needs text" in (registry.handle(state, "/add #work") or "")
    assert state.store.tasks == []

    reply = registry.handle(state, "/add #work // call back Anna")
    assert reply is not None and "call back Anna" in reply
    task = state.store.tasks[0]
    work = next(c for c in state.store.categories if c.name == "Work")
    assert (task.text, task.description, task.category_id) == ("", "call back Anna", work.id)

    registry.handle(state, "/add Plan sprint")
    plain = state.store.tasks[-1]
    assert "needs text" in (registry.handle(state, f"/edit {plain.id} #work") or "")
    assert plain.text == "Plan sprint"
    assert plain.category_id is None


def test_done_archive_rm_by_list_number(state) -> None:
    registry.handle(state, "/add first")
    registry.handle(state, "/add second")
    registry.handle(state, "/view recent")
    second, first = state.last_listed

    assert "Completed" in (registry.handle(state, "/done 2") or "")
    done = state.store.get_task(first)
    assert done is not None and done.completed

    registry.handle(state, "/archive 1")
    archived = state.store.get_task(second)
    assert archived is not None and archived.archived

    listing = registry.handle(state, "/view archived") or ""
    assert "second" in listing and "first" not in listing

    registry.handle(state, "/unarchive 1")
    assert not archived.archived

    registry.handle(state, f"/rm {first}")
    assert state.store.get_task(first) is None


def test_edit_keeps_category_unless_retagged(state) -> None:
    registry.handle(state, "/add Report #work")
    task = state.store.tasks[0]
    work_id = task.category_id
    assert work_id is not None

    registry.handle(state, f"/edit {task.id} Final report due:tomorrow // v2")
    assert task.text == "Final report"
    assert task.category_id == work_id
    assert task.reminder is not None
    assert task.description == "v2"

    registry.handle(state, f"/edit {task.id} Final report #personal")
    personal = next(c for c in state.store.categories if c.name == "Personal")
    assert task.category_id == personal.id
    assert task.reminder is None


def test_category_commands(state) -> None:
    assert "Added category" in (registry.handle(state, "/cat add Garden #22c55e") or "")
    names = [c.name for c in state.store.categories]
    assert names[-1] == "Garden"

    listing = registry.handle(state, "/cat mv 5 1") or ""
    assert [c.name for c in state.store.categories][0] == "Garden"
    assert "1. Garden" in listing

    registry.handle(state, "/add Weed beds #garden")
    task = state.store.tasks[0]
    registry.handle(state, "/cat rm garden")
    assert task.category_id is None
    assert all(c.name != "Garden" for c in state.store.categories)

    assert "limited to 20" in (registry.handle(state, "/cat add " + "n" * 21 + " #fff") or "")
    assert "No category matches" in (registry.handle(state, "/cat rm nothing") or "")


def test_status_and_help(state) -> None:
    registry.handle(state, "/add one")
    status = registry.handle(state, "/status") or ""
    assert "Tasks: 1" in status
    assert "/add" in (registry.handle(state, "/help") or "")


def test_commands_persist_to_disk(state, settings) -> None:
    registry.handle(state, "/add persisted")
    path = settings.data_dir / f"{settings.storage_key}.json"
    assert path.exists()
    assert "persisted" in path.read_text("utf-8")
