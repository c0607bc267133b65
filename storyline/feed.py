"""Category filters and sort modes for story and theme feeds."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Sequence

from .config import RankingConfig
from .fields import as_list, resolve_first
from .ranking import ContentRanker, as_record
from .timestamps import coerce_timestamp_ms

ALL = "All"
SORT_MODES = ("relevance", "updated", "published")


def matches_category(item: Any, category: str) -> bool:
    if category == ALL:
        return True
    record = as_record(item)
    categories = record.get("allCategories")
    if not isinstance(categories, (list, tuple)):
        categories = [record["category"]] if record.get("category") else []
    wanted = category.lower()
    return any(str(entry or "").lower() == wanted for entry in categories)


def matches_subcategory(item: Any, subcategory: str) -> bool:
    if subcategory == ALL:
        return True
    record = as_record(item)
    secondary = as_list(record.get("secondarySubcategories"))
    return record.get("subcategory") == subcategory or subcategory in secondary


def filter_feed(items: Sequence[Any], category: str = ALL, subcategory: str = ALL) -> List[Any]:
    return [
        item
        for item in items
        if matches_category(item, category) and matches_subcategory(item, subcategory)
    ]


def updated_ms(item: Any) -> int:
    return coerce_timestamp_ms(resolve_first(as_record(item), "item.feed_time", predicate=bool))


def published_ms(item: Any) -> int:
    return coerce_timestamp_ms(as_record(item).get("createdAt"))


def sort_feed(
    items: Sequence[Any],
    mode: str = "relevance",
    now: Optional[datetime] = None,
    config: Optional[RankingConfig] = None,
) -> List[Any]:
    """Order a feed by relevance score, last update, or first publication."""

    if mode not in SORT_MODES:
        raise ValueError(f"unsupported sort mode: {mode!r}")
    if mode == "updated":
        return sorted(items, key=updated_ms, reverse=True)
    if mode == "published":
        return sorted(items, key=published_ms, reverse=True)
    return ContentRanker(config, now).rank(items)


__all__ = [
    "ALL",
    "SORT_MODES",
    "filter_feed",
    "matches_category",
    "matches_subcategory",
    "published_ms",
    "sort_feed",
    "updated_ms",
]
