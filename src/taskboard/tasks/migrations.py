# src/taskboard/tasks/migrations.py

"""
Persisted-document migrations.

Each step is a pure function ``state -> state`` keyed by the version it upgrades
FROM. Loading folds the steps from the persisted version up to CURRENT_VERSION,
so adding version 3 means adding one function and one mapping entry.

Version history:
- 0: ``savedTexts`` is a plain list of strings.
- 1: ``savedTexts`` holds full task records; ``categories`` exists.
- 2: category colors moved to the current palette.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.ports import Clock, Document, IdFactory
from .task_models import new_id, now_ms

logger = logging.getLogger(__name__)

CURRENT_VERSION = 2

State = dict[str, Any]
MigrationStep = Callable[[State, "MigrationContext"], State]

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Work", "#3b82f6"),
    ("Personal", "#10b981"),
    ("Shopping", "#f59e0b"),
    ("Health", "#ef4444"),
)

# Category name (lowercase) -> color in the current palette.
CATEGORY_COLOR_REMAP: dict[str, str] = {name.lower(): color for name, color in DEFAULT_CATEGORIES}


@dataclass(frozen=True, slots=True)
class MigrationContext:
    clock: Clock = now_ms
    id_factory: IdFactory = new_id


def default_categories(id_factory: IdFactory = new_id) -> list[dict[str, str]]:
    return [{"id": id_factory(), "name": name, "color": color} for name, color in DEFAULT_CATEGORIES]


def empty_state(id_factory: IdFactory = new_id) -> State:
    return {"savedTexts": [], "categories": default_categories(id_factory)}


# ---- steps ----


def _v0_to_v1(state: State, ctx: MigrationContext) -> State:
    now = ctx.clock()
    tasks: list[Any] = []
    for item in state.get("savedTexts") or []:
        if isinstance(item, str):
            tasks.append({"id": ctx.id_factory(), "text": item, "completed": False, "createdAt": now})
        else:
            # Already a record (partially migrated data): keep as-is.
            tasks.append(item)

    out = dict(state)
    out["savedTexts"] = tasks
    if not isinstance(out.get("categories"), list):
        out["categories"] = default_categories(ctx.id_factory)
    return out


def _v1_to_v2(state: State, ctx: MigrationContext) -> State:
    categories: list[Any] = []
    raw = state.get("categories")
    for cat in raw if isinstance(raw, list) else []:
        if isinstance(cat, dict):
            name = str(cat.get("name") or "").lower()
            color = CATEGORY_COLOR_REMAP.get(name)
            if color is not None:
                cat = {**cat, "color": color}
        categories.append(cat)

    out = dict(state)
    out["categories"] = categories
    return out


MIGRATIONS: dict[int, MigrationStep] = {
    0: _v0_to_v1,
    1: _v1_to_v2,
}


def migrate_state(state: State, from_version: int, ctx: MigrationContext | None = None) -> State:
    """
    Upgrade ``state`` from ``from_version`` to CURRENT_VERSION.

    The input is never mutated. Versions newer than CURRENT_VERSION pass through untouched.
    """
    ctx = ctx or MigrationContext()
    out = copy.deepcopy(state)
    version = max(0, from_version)
    while version < CURRENT_VERSION:
        step = MIGRATIONS[version]
        out = step(out, ctx)
        logger.info("Migrated task document v%s -> v%s", version, version + 1)
        version += 1
    return out


def document_version(document: Document) -> int:
    raw = document.get("version", 0)
    if isinstance(raw, bool) or not isinstance(raw, int):
        return 0
    return raw


def is_valid_document(document: Any) -> bool:
    """Basic shape check; anything failing it is reset rather than migrated."""
    if not isinstance(document, dict):
        return False
    state = document.get("state")
    if not isinstance(state, dict):
        return False
    if not isinstance(state.get("savedTexts"), list):
        return False
    return "categories" not in state or isinstance(state["categories"], list)


@dataclass(slots=True)
class LoadResult:
    state: State
    version: int
    migrated: bool = False
    reset: bool = False


def load_document(document: Document | None, ctx: MigrationContext | None = None) -> LoadResult:
    """
    Turn whatever the backing returned into a current-version state.

    Missing or malformed documents fall back to an empty task list plus the
    default categories; this never raises.
    """
    ctx = ctx or MigrationContext()

    if document is None:
        logger.info("No task document found; starting empty.")
        return LoadResult(state=empty_state(ctx.id_factory), version=CURRENT_VERSION, reset=True)

    if not is_valid_document(document):
        logger.warning("Malformed task document; resetting to defaults.")
        return LoadResult(state=empty_state(ctx.id_factory), version=CURRENT_VERSION, reset=True)

    version = document_version(document)
    state = document["state"]

    if version > CURRENT_VERSION:
        logger.warning(
            "Task document version %s is newer than supported %s; loading as-is.",
            version,
            CURRENT_VERSION,
        )
        return LoadResult(state=copy.deepcopy(state), version=version)

    if version == CURRENT_VERSION:
        return LoadResult(state=copy.deepcopy(state), version=version)

    return LoadResult(state=migrate_state(state, version, ctx), version=CURRENT_VERSION, migrated=True)
