# src/taskboard/tasks/task_store.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import Clock, Document, IdFactory, KeyValueBacking
from .migrations import CURRENT_VERSION, MigrationContext, load_document
from .tagging import extract_category_tag
from .task_models import CategoryItem, RepeatRule, Task, new_id, now_ms

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Task and category state with write-through persistence.

    Semantics:
    - all operations are synchronous; every mutation writes the full document
    - mutations on unknown ids are silent no-ops
    - the store does no input validation (that is the UI's job)
    - a failed write is logged; in-memory state stays authoritative

    Construct once and pass it around (see core/state.py); there is no global instance.
    """

    def __init__(
        self,
        backing: KeyValueBacking,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._backing = backing
        self._clock = clock or now_ms
        self._id_factory = id_factory or new_id
        self._tasks: list[Task] = []
        self._categories: list[CategoryItem] = []
        self._version = CURRENT_VERSION
        self._load()
        logger.info(
            "TaskStore ready tasks=%s categories=%s version=%s",
            len(self._tasks),
            len(self._categories),
            self._version,
        )

    # ---- loading / persistence ----

    def _load(self) -> None:
        try:
            raw = self._backing.load()
        except Exception:
            logger.exception("Task backing failed to load; starting from defaults.")
            raw = None

        ctx = MigrationContext(clock=self._clock, id_factory=self._id_factory)
        result = load_document(raw, ctx)
        self._version = result.version
        self._hydrate(result.state)

        if result.migrated:
            self._persist()

    def _hydrate(self, state: dict[str, Any]) -> None:
        raw_categories = state.get("categories")
        self._categories = [
            CategoryItem.from_dict(c) for c in (raw_categories if isinstance(raw_categories, list) else [])
            if isinstance(c, dict)
        ]
        known = {c.id for c in self._categories}

        now = self._clock()
        tasks: list[Task] = []
        for raw in state.get("savedTexts", []):
            if not isinstance(raw, dict):
                logger.debug("Dropping non-record task entry: %r", raw)
                continue
            task = Task.from_dict(raw, fallback_created_at=now)
            if not task.id:
                task.id = self._id_factory()
            if task.category_id is not None and task.category_id not in known:
                task.category_id = None
            tasks.append(task)
        self._tasks = tasks

    def to_document(self) -> Document:
        return {
            "version": self._version,
            "state": {
                "savedTexts": [t.to_dict() for t in self._tasks],
                "categories": [c.to_dict() for c in self._categories],
            },
        }

    def _persist(self) -> None:
        try:
            self._backing.save(self.to_document())
        except Exception:
            logger.exception("Failed to persist task document.")

    # ---- reads ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def categories(self) -> list[CategoryItem]:
        return list(self._categories)

    @property
    def version(self) -> int:
        return self._version

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def get_category(self, category_id: str) -> CategoryItem | None:
        for c in self._categories:
            if c.id == category_id:
                return c
        return None

    # ---- tasks ----

    def _auto_tag(self, text: str, category_id: str | None) -> tuple[str, str | None]:
        if category_id is not None:
            return text, category_id
        return extract_category_tag(text, self._categories)

    def add_task(
        self,
        text: str,
        reminder: str | None = None,
        category_id: str | None = None,
        repeat: RepeatRule | str | None = None,
        description: str | None = None,
    ) -> str:
        text, category_id = self._auto_tag(text, category_id)
        task = Task(
            id=self._id_factory(),
            text=text,
            created_at=self._clock(),
            description=description,
            reminder=reminder,
            repeat=RepeatRule.from_raw(repeat),
            category_id=category_id,
        )
        self._tasks.append(task)
        logger.debug(
            "Task added id=%s reminder=%s category=%s repeat=%s",
            task.id,
            reminder,
            category_id,
            task.repeat.value,
        )
        self._persist()
        return task.id

    def delete_task(self, task_id: str) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        if len(self._tasks) == before:
            logger.debug("delete_task: no task id=%s", task_id)
            return
        self._persist()

    def toggle_complete(self, task_id: str) -> None:
        task = self.get_task(task_id)
        if task is None:
            logger.debug("toggle_complete: no task id=%s", task_id)
            return
        task.completed = not task.completed
        task.completed_at = self._clock() if task.completed else None
        self._persist()

    def archive_task(self, task_id: str) -> None:
        self._set_archived(task_id, True)

    def unarchive_task(self, task_id: str) -> None:
        self._set_archived(task_id, False)

    def _set_archived(self, task_id: str, archived: bool) -> None:
        task = self.get_task(task_id)
        if task is None:
            logger.debug("set archived=%s: no task id=%s", archived, task_id)
            return
        task.archived = archived
        self._persist()

    def update_task(
        self,
        task_id: str,
        text: str,
        reminder: str | None = None,
        category_id: str | None = None,
        repeat: RepeatRule | str | None = None,
        description: str | None = None,
    ) -> None:
        """
        Replace the editable fields wholesale: anything not passed is cleared.
        created_at, completion state and archived are left alone.
        """
        task = self.get_task(task_id)
        if task is None:
            logger.debug("update_task: no task id=%s", task_id)
            return
        text, category_id = self._auto_tag(text, category_id)
        task.text = text
        task.reminder = reminder
        task.category_id = category_id
        task.repeat = RepeatRule.from_raw(repeat)
        task.description = description
        self._persist()

    # ---- categories ----

    def add_category(self, name: str, color: str) -> str:
        cat = CategoryItem(id=self._id_factory(), name=name, color=color)
        self._categories.append(cat)
        logger.debug("Category added id=%s name=%s", cat.id, name)
        self._persist()
        return cat.id

    def update_category(self, category_id: str, name: str, color: str) -> None:
        cat = self.get_category(category_id)
        if cat is None:
            logger.debug("update_category: no category id=%s", category_id)
            return
        cat.name = name
        cat.color = color
        self._persist()

    def delete_category(self, category_id: str) -> None:
        before = len(self._categories)
        self._categories = [c for c in self._categories if c.id != category_id]
        if len(self._categories) == before:
            logger.debug("delete_category: no category id=%s", category_id)
            return

        cleared = 0
        for task in self._tasks:
            if task.category_id == category_id:
                task.category_id = None
                cleared += 1
        logger.debug("Category deleted id=%s cleared_tasks=%s", category_id, cleared)
        self._persist()

    def reorder_categories(self, from_index: int, to_index: int) -> None:
        """Move the category at from_index to to_index (a move, not a swap)."""
        n = len(self._categories)
        if not (0 <= from_index < n and 0 <= to_index < n):
            logger.debug("reorder_categories: out of range %s -> %s (n=%s)", from_index, to_index, n)
            return
        cat = self._categories.pop(from_index)
        self._categories.insert(to_index, cat)
        self._persist()
