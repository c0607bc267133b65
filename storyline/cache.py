"""Caller-owned cache of the last known story list."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from .config import SimilarityConfig
from .search import search_stories
from .suggestions import build_suggestions


class StoryCache:
    """Hold the most recently fetched stories for search and suggestions.

    Each screen or request handler owns its own instance; nothing in the
    library keeps a module-level copy.
    """

    def __init__(self, stories: Optional[List[Any]] = None) -> None:
        self._stories: List[Any] = []
        self.update(stories)

    def update(self, stories: Any) -> None:
        self._stories = list(stories) if isinstance(stories, (list, tuple)) else []

    def clear(self) -> None:
        self._stories = []

    @property
    def stories(self) -> List[Any]:
        return list(self._stories)

    def __len__(self) -> int:
        return len(self._stories)

    def search(self, query: str) -> List[Any]:
        return search_stories(self._stories, query)

    def suggestions_for(
        self,
        base: Any,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
        config: Optional[SimilarityConfig] = None,
    ) -> List[Any]:
        return build_suggestions(base, self._stories, limit=limit, now=now, config=config)


__all__ = ["StoryCache"]
