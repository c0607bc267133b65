"""Keyword search over a story list."""

from __future__ import annotations

from typing import Any, List, Sequence

from .fields import lookup, resolve_first
from .ranking import as_record
from .timestamps import coerce_timestamp_ms

TITLE_HIT = 3
OVERVIEW_HIT = 1
SUMMARY_HIT = 1


def _text(value: Any) -> str:
    return value.lower() if isinstance(value, str) else ""


def search_score(story: Any, query: str) -> int:
    record = as_record(story)
    score = 0
    if query in _text(record.get("title")):
        score += TITLE_HIT
    if query in _text(resolve_first(record, "item.overview", predicate=bool, default="")):
        score += OVERVIEW_HIT
    if query in _text(lookup(record, "analysis.summary")):
        score += SUMMARY_HIT
    return score


def search_stories(stories: Sequence[Any], query: str) -> List[Any]:
    """Stories matching ``query``, best match first, then most recently updated."""

    needle = (query or "").strip().lower()
    if not needle or not isinstance(stories, (list, tuple)):
        return []
    matches = []
    for story in stories:
        score = search_score(story, needle)
        if score > 0:
            updated = coerce_timestamp_ms(as_record(story).get("updatedAt"))
            matches.append((score, updated, story))
    matches.sort(key=lambda entry: (entry[0], entry[1]), reverse=True)
    return [story for _, _, story in matches]


__all__ = ["search_score", "search_stories"]
