# src/taskboard/tasks/reminders.py

"""
Reminder encoding and presentation helpers.

A reminder is one ISO-8601 timestamp. When the user picks only a date, the
time is pinned to local 09:00:01; an explicitly chosen time always has
seconds == 0. The seconds field is therefore the "time was set" flag.

Known limitation: a reminder genuinely meant for 09:00:01 reads as date-only.
Changing that would change the persisted format, so it stays.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time, timedelta
from enum import StrEnum

from .task_models import RepeatRule, Task

logger = logging.getLogger(__name__)

DATE_ONLY_TIME = time(9, 0, 1)
URGENT_WINDOW = timedelta(hours=1)

REPEAT_LABELS: dict[RepeatRule, str] = {
    RepeatRule.DAILY: "Daily",
    RepeatRule.WEEKLY: "Weekly",
    RepeatRule.MONTHLY: "Monthly",
    RepeatRule.WEEKDAYS: "Weekdays",
}


class Urgency(StrEnum):
    OVERDUE = "overdue"
    URGENT = "urgent"
    NORMAL = "normal"


def to_local(dt: datetime) -> datetime:
    """Aware local datetime; naive input is taken as local wall time."""
    return dt.astimezone()


def parse_reminder(reminder: str | None) -> datetime | None:
    if not reminder:
        return None
    try:
        return to_local(datetime.fromisoformat(reminder))
    except (ValueError, OverflowError):
        logger.debug("Unparseable reminder %r treated as absent.", reminder)
        return None


def make_reminder(day: date, at: time | None = None) -> str:
    """
    Encode a picked date (+ optional time) as a stored reminder.

    Stored in UTC with millisecond precision and a trailing "Z".
    """
    wall = DATE_ONLY_TIME if at is None else at.replace(second=0, microsecond=0)
    local = datetime.combine(day, wall).astimezone()
    return local.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_time_set(reminder: str | datetime) -> bool:
    dt = parse_reminder(reminder) if isinstance(reminder, str) else to_local(reminder)
    if dt is None:
        return False
    return (dt.hour, dt.minute, dt.second) != (
        DATE_ONLY_TIME.hour,
        DATE_ONLY_TIME.minute,
        DATE_ONLY_TIME.second,
    )


def classify_urgency(reminder: str | datetime, now: datetime) -> Urgency:
    dt = parse_reminder(reminder) if isinstance(reminder, str) else to_local(reminder)
    if dt is None:
        return Urgency.NORMAL
    now = to_local(now)
    if dt < now:
        return Urgency.OVERDUE
    if dt <= now + URGENT_WINDOW:
        return Urgency.URGENT
    return Urgency.NORMAL


def format_reminder(reminder: str, now: datetime) -> str:
    """
    "Today", "Tomorrow" or "Mon, Oct 19"; the clock time is appended only when
    the user actually set one ("Today, 14:30").
    """
    dt = parse_reminder(reminder)
    if dt is None:
        return ""
    today = to_local(now).date()
    day = dt.date()

    if day == today:
        label = "Today"
    elif day == today + timedelta(days=1):
        label = "Tomorrow"
    else:
        label = f"{dt.strftime('%a, %b')} {day.day}"
        if day.year != today.year:
            label += f", {day.year}"

    if is_time_set(dt):
        label += f", {dt.strftime('%H:%M')}"
    return label


def repeat_label(repeat: RepeatRule) -> str:
    return REPEAT_LABELS.get(repeat, "")


def format_due(task: Task, now: datetime) -> str:
    """Reminder text plus the recurrence label, e.g. "Tomorrow • Daily"."""
    if not task.reminder:
        return ""
    text = format_reminder(task.reminder, now)
    label = repeat_label(task.repeat)
    if text and label:
        return f"{text} • {label}"
    return text
