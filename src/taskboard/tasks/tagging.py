# src/taskboard/tasks/tagging.py

from __future__ import annotations

import re
from collections.abc import Sequence

from .task_models import CategoryItem

_MULTISPACE_RE = re.compile(r"\s{2,}")


def extract_category_tag(text: str, categories: Sequence[CategoryItem]) -> tuple[str, str | None]:
    """
    Detect a "#category" hashtag in task text.

    Categories are tried in positional order; the first one whose name appears
    as a whitespace-delimited #token (case-insensitive) wins. That token is
    removed and whitespace normalized. Without a match the text is returned
    unchanged.
    """
    for cat in categories:
        if not cat.name:
            continue
        pattern = re.compile(r"(?<!\S)#" + re.escape(cat.name) + r"(?!\S)", re.IGNORECASE)
        if not pattern.search(text):
            continue
        cleaned = pattern.sub("", text, count=1)
        cleaned = _MULTISPACE_RE.sub(" ", cleaned).strip()
        return cleaned, cat.id
    return text, None
