# src/taskboard/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta

from ..core.state import AppState
from ..tasks.reminders import Urgency, classify_urgency, format_due, make_reminder
from ..tasks.tagging import extract_category_tag
from ..tasks.task_models import (
    CategoryItem,
    RepeatRule,
    Task,
    validate_category_name,
    validate_task_input,
)
from ..tasks.views import CategoryGroup, DateGroups, ViewMode, derive_view

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ValueError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

DESCRIPTION_SEP = " // "


def _now() -> datetime:
    return datetime.now().astimezone()


# ---- argument parsing ----


def _parse_day(raw: str, today: date) -> date:
    low = raw.lower()
    if low == "today":
        return today
    if low == "tomorrow":
        return today + timedelta(days=1)
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValueError(f"Bad date {raw!r}; use YYYY-MM-DD, today or tomorrow.") from None


def _parse_time(raw: str) -> time:
    try:
        return time.fromisoformat(raw)
    except ValueError:
        raise ValueError(f"Bad time {raw!r}; use HH:MM.") from None


def parse_task_args(args: list[str], today: date) -> tuple[str, str | None, RepeatRule, str | None]:
    """
    Split "/add" style arguments into (text, reminder, repeat, description).

    Recognized tokens: due:<YYYY-MM-DD|today|tomorrow>, at:<HH:MM>, every:<repeat>.
    Anything after "//" is the description; a line may start with it.
    """
    words: list[str] = []
    day: date | None = None
    at: time | None = None
    repeat = RepeatRule.NONE

    for token in args:
        key, sep, value = token.partition(":")
        key = key.lower()
        if sep and key == "due":
            day = _parse_day(value, today)
        elif sep and key == "at":
            at = _parse_time(value)
        elif sep and key == "every":
            try:
                repeat = RepeatRule(value.lower())
            except ValueError:
                options = ", ".join(r.value for r in RepeatRule)
                raise ValueError(f"Unknown repeat {value!r}; use one of: {options}.") from None
        else:
            words.append(token)

    if at is not None and day is None:
        day = today

    line = " ".join(words)
    text, _, description = f" {line} ".partition(DESCRIPTION_SEP)
    text = text.strip()
    description = description.strip() or None

    try:
        reminder = make_reminder(day, at) if day is not None else None
    except OverflowError:
        raise ValueError(f"Date {day} is out of range.") from None
    if reminder is None:
        # A recurrence label means nothing without a reminder.
        repeat = RepeatRule.NONE
    return text, reminder, repeat, description


def _resolve_task(state: AppState, ref: str) -> Task:
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(state.last_listed):
            task = state.store.get_task(state.last_listed[n - 1])
            if task is not None:
                return task
    matches = [t for t in state.store.tasks if t.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise ValueError(f"Task reference {ref!r} is ambiguous.")
    raise ValueError(f"No task matches {ref!r}.")


def _resolve_category(state: AppState, ref: str) -> CategoryItem:
    categories = state.store.categories
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(categories):
            return categories[n - 1]
    for c in categories:
        if c.name.lower() == ref.lower():
            return c
    matches = [c for c in categories if c.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise ValueError(f"No category matches {ref!r}.")


# ---- rendering ----


_URGENCY_MARK = {Urgency.OVERDUE: "!", Urgency.URGENT: "*", Urgency.NORMAL: ""}


def _task_line(state: AppState, n: int, task: Task, now: datetime) -> str:
    box = "[x]" if task.completed else "[ ]"
    parts = [f"{n:>3}. {box} {task.text or '(no title)'}"]
    if task.reminder:
        mark = "" if task.completed else _URGENCY_MARK[classify_urgency(task.reminder, now)]
        parts.append(f"({format_due(task, now)}){mark}")
    if task.category_id:
        cat = state.store.get_category(task.category_id)
        if cat is not None:
            parts.append(f"#{cat.name}")
    if task.description:
        parts.append("+notes")
    parts.append(f"[{task.id[:8]}]")
    return " ".join(parts)


def render_view(state: AppState, mode: ViewMode, now: datetime | None = None) -> str:
    now = now or _now()
    view = derive_view(state.store.tasks, state.store.categories, mode, now)

    sections: list[tuple[str | None, list[Task]]]
    if isinstance(view, DateGroups):
        sections = [(title, tasks) for title, tasks in view.sections() if tasks]
    elif mode is ViewMode.CATEGORIES:
        sections = [
            (g.category.name if g.category is not None else "No category", g.tasks)
            for g in view
            if isinstance(g, CategoryGroup) and g.tasks
        ]
    else:
        sections = [(None, [t for t in view if isinstance(t, Task)])]

    listed: list[str] = []
    lines: list[str] = [f"View: {mode.value}"]
    for title, tasks in sections:
        if title is not None:
            lines.append(f"-- {title} --")
        for task in tasks:
            listed.append(task.id)
            lines.append(_task_line(state, len(listed), task, now))

    state.view_mode = mode
    state.last_listed = listed
    logger.debug("Rendered view mode=%s tasks=%s", mode.value, len(listed))
    if not listed:
        lines.append("  (nothing here)")
    return "\n".join(lines)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    done = sum(1 for t in tasks if t.completed)
    archived = sum(1 for t in tasks if t.archived)
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} (done: {done}, archived: {archived})\n"
        f"  Categories: {len(state.store.categories)}\n"
        f"  Current view: {state.view_mode.value}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Buy milk #shopping due:tomorrow at:18:00 every:weekly // 2 litres
    """
    text, reminder, repeat, description = parse_task_args(args, _now().date())
    text, category_id = extract_category_tag(text, state.store.categories)
    validate_task_input(text, description)
    task_id = state.store.add_task(text, reminder, category_id, repeat, description)
    return f"Added [{task_id[:8]}] {text or description}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <ref> <text and tokens>  -> replaces text, reminder, repeat, description.
    The category is kept unless the new text carries a #hashtag.
    """
    if len(args) < 2:
        return "Usage: /edit <task> <text> [due:...] [at:...] [every:...] [// description]"
    task = _resolve_task(state, args[0])
    text, reminder, repeat, description = parse_task_args(args[1:], _now().date())
    text, category_id = extract_category_tag(text, state.store.categories)
    validate_task_input(text, description)
    if category_id is None:
        category_id = task.category_id

    state.store.update_task(task.id, text, reminder, category_id, repeat, description)
    return f"Updated [{task.id[:8]}]"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task>"
    task = _resolve_task(state, args[0])
    state.store.toggle_complete(task.id)
    return f"{'Completed' if task.completed else 'Reopened'} [{task.id[:8]}] {task.text}"


def cmd_archive(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /archive <task>"
    task = _resolve_task(state, args[0])
    state.store.archive_task(task.id)
    return f"Archived [{task.id[:8]}] {task.text}"


def cmd_unarchive(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /unarchive <task>"
    task = _resolve_task(state, args[0])
    state.store.unarchive_task(task.id)
    return f"Restored [{task.id[:8]}] {task.text}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <task>"
    task = _resolve_task(state, args[0])
    state.store.delete_task(task.id)
    return f"Deleted [{task.id[:8]}] {task.text}"


def cmd_view(state: AppState, args: list[str]) -> str:
    """
    /view              -> show the current view again
    /view <mode>       -> dates | recent | categories | repeating | archived
    """
    if not args:
        return render_view(state, state.view_mode)
    try:
        mode = ViewMode(args[0].lower())
    except ValueError:
        options = " | ".join(m.value for m in ViewMode)
        return f"Unknown view {args[0]!r}. Use: {options}."
    return render_view(state, mode)


def cmd_cat(state: AppState, args: list[str]) -> str:
    """
    /cat list
    /cat add <name> <color>
    /cat edit <category> <name> <color>
    /cat rm <category>
    /cat mv <from> <to>        (1-based positions)
    """
    usage = (
        "Categories:\n"
        "  /cat list\n"
        "  /cat add <name> <color>\n"
        "  /cat edit <category> <name> <color>\n"
        "  /cat rm <category>\n"
        "  /cat mv <from> <to>\n"
    )
    if not args:
        return usage

    sub = args[0].lower()
    rest = args[1:]

    if sub in ("list", "ls"):
        cats = state.store.categories
        if not cats:
            return "No categories."
        lines = ["Categories:"]
        for i, c in enumerate(cats, start=1):
            lines.append(f"{i:>3}. {c.name} ({c.color}) [{c.id[:8]}]")
        return "\n".join(lines)

    if sub == "add":
        if len(rest) < 2:
            return "Usage: /cat add <name> <color>"
        name, color = " ".join(rest[:-1]), rest[-1]
        validate_category_name(name)
        cat_id = state.store.add_category(name, color)
        return f"Added category {name} [{cat_id[:8]}]"

    if sub == "edit":
        if len(rest) < 3:
            return "Usage: /cat edit <category> <name> <color>"
        cat = _resolve_category(state, rest[0])
        name, color = " ".join(rest[1:-1]), rest[-1]
        validate_category_name(name)
        state.store.update_category(cat.id, name, color)
        return f"Updated category {name}"

    if sub in ("rm", "del"):
        if not rest:
            return "Usage: /cat rm <category>"
        cat = _resolve_category(state, rest[0])
        state.store.delete_category(cat.id)
        return f"Deleted category {cat.name}"

    if sub in ("mv", "move"):
        if len(rest) != 2 or not all(r.isdigit() for r in rest):
            return "Usage: /cat mv <from> <to>"
        state.store.reorder_categories(int(rest[0]) - 1, int(rest[1]) - 1)
        return cmd_cat(state, ["list"])

    return usage


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts and the current view.")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add <text> [#category] [due:YYYY-MM-DD] [at:HH:MM] [every:daily] [// notes].",
)
registry.register("edit", cmd_edit, help_text="Replace a task's text/reminder/notes: /edit <task> <text ...>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <task>.", aliases=["toggle"])
registry.register("archive", cmd_archive, help_text="Archive a task: /archive <task>.")
registry.register("unarchive", cmd_unarchive, help_text="Restore an archived task: /unarchive <task>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <task>.", aliases=["del"])
registry.register(
    "view",
    cmd_view,
    help_text="Show tasks: /view dates | recent | categories | repeating | archived.",
    aliases=["ls"],
)
registry.register("cat", cmd_cat, help_text="Manage categories: /cat list | add | edit | rm | mv.")
