# src/taskboard/tasks/backing.py

from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
from pathlib import Path

from ..core.ports import Document

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "text-storage"


class JsonFileBacking:
    """
    Key-value backing on the local filesystem.

    One JSON file per storage key: <directory>/<key>.json.
    Writes go through a temp file + os.replace so a crash never leaves half a document.
    """

    def __init__(self, directory: str | Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._path = Path(directory) / f"{key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Document | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable task document at %s; ignoring it.", self._path, exc_info=True)
            return None
        if not isinstance(data, dict):
            logger.warning("Task document at %s is not a JSON object; ignoring it.", self._path)
            return None
        return data

    def save(self, document: Document) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            # Descriptions may hold personal notes.
            os.chmod(self._path, 0o600)
        logger.debug("Saved task document to %s", self._path)


class InMemoryBacking:
    """Process-local backing (tests, demos). Stores deep copies so callers can't alias state."""

    def __init__(self, document: Document | None = None) -> None:
        self._document = copy.deepcopy(document)
        self.save_count = 0

    @property
    def document(self) -> Document | None:
        return copy.deepcopy(self._document)

    def load(self) -> Document | None:
        return copy.deepcopy(self._document)

    def save(self, document: Document) -> None:
        self._document = copy.deepcopy(document)
        self.save_count += 1
