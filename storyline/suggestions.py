"""Similarity scoring for "continue reading" suggestions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Set

from .config import SimilarityConfig
from .fields import resolve_first
from .ranking import as_record
from .timestamps import coerce_timestamp_ms, datetime_to_ms

MS_PER_DAY = 86_400_000
TAG_FIELDS = ("tags", "allCategories", "category", "subcategory")


@dataclass
class Suggestion:
    item: Any
    score: float


def item_id(item: Any) -> Optional[str]:
    value = resolve_first(as_record(item), "item.id", predicate=bool)
    return str(value) if value is not None else None


def primary_category(item: Any) -> str:
    return str(resolve_first(as_record(item), "item.primary_category", predicate=bool, default=""))


def tag_set(item: Any) -> Set[str]:
    """Lower-cased tags, categories and subcategory of an item, merged."""

    record = as_record(item)
    tags: Set[str] = set()
    for name in TAG_FIELDS:
        value = record.get(name)
        if not value:
            continue
        if isinstance(value, (list, tuple, set)):
            tags.update(str(entry).lower() for entry in value if entry)
        else:
            tags.add(str(value).lower())
    return tags


def _now_ms(now: Optional[datetime]) -> int:
    return datetime_to_ms(now or datetime.now(timezone.utc))


def recency_weight(item: Any, now: Optional[datetime] = None, config: Optional[SimilarityConfig] = None) -> float:
    """Linear freshness weight: 1 for brand new, 0 at the recency horizon."""

    config = config or SimilarityConfig()
    stamp = resolve_first(as_record(item), "item.similarity_time", predicate=bool)
    millis = coerce_timestamp_ms(stamp)
    if not millis:
        return 0.0
    horizon_days = config.recency_horizon.as_timedelta().total_seconds() / 86400
    days = (_now_ms(now) - millis) / MS_PER_DAY
    if days < 0:
        return 1.0
    if horizon_days <= 0:
        return 0.0
    return max(0.0, 1.0 - min(days, horizon_days) / horizon_days)


def score_similarity(
    base: Any,
    candidate: Any,
    now: Optional[datetime] = None,
    config: Optional[SimilarityConfig] = None,
) -> float:
    """Score how good ``candidate`` is as a follow-up to ``base``.

    Not symmetric: the recency term only looks at the candidate.
    """

    if not base or not candidate:
        return 0.0
    config = config or SimilarityConfig()
    shared = len(tag_set(candidate) & tag_set(base))
    same_category = primary_category(base).lower() == primary_category(candidate).lower()
    return (
        shared * config.tag_weight
        + (config.category_weight if same_category else 0.0)
        + recency_weight(candidate, now, config) * config.recency_weight
    )


def rank_suggestions(
    base: Any,
    pool: Iterable[Any],
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
    config: Optional[SimilarityConfig] = None,
) -> List[Suggestion]:
    if not base:
        return []
    config = config or SimilarityConfig()
    if limit is None:
        limit = config.limit
    now = now or datetime.now(timezone.utc)
    base_id = item_id(base)

    scored: List[Suggestion] = []
    for candidate in pool or []:
        candidate_id = item_id(candidate)
        if not candidate_id or candidate_id == base_id:
            continue
        scored.append(Suggestion(item=candidate, score=score_similarity(base, candidate, now, config)))
    scored.sort(key=lambda entry: entry.score, reverse=True)
    return scored[:limit]


def build_suggestions(
    base: Any,
    pool: Iterable[Any],
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
    config: Optional[SimilarityConfig] = None,
) -> List[Any]:
    """Pick the top ``limit`` items of ``pool`` to read after ``base``."""

    return [entry.item for entry in rank_suggestions(base, pool, limit, now, config)]


__all__ = [
    "Suggestion",
    "build_suggestions",
    "item_id",
    "primary_category",
    "rank_suggestions",
    "recency_weight",
    "score_similarity",
    "tag_set",
]
