"""Feed relevance scoring for stories and themes."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence

from .config import RankingConfig
from .fields import as_list, is_present, resolve_first
from .models import EventBlock
from .timestamps import coerce_timestamp_ms, datetime_to_ms

MS_PER_HOUR = 3_600_000


def as_record(item: Any) -> Mapping[str, Any]:
    """Accept raw mappings as well as objects exposing ``to_dict()``."""

    if isinstance(item, Mapping):
        return item
    to_dict = getattr(item, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {}


def _truthy(value: Any) -> bool:
    return bool(value)


class ContentRanker:
    """Score content by freshness and by how fast its timeline is growing.

    A single ranker pins ``now`` so every item in one ranking pass is
    measured against the same clock.
    """

    def __init__(self, config: Optional[RankingConfig] = None, now: Optional[datetime] = None) -> None:
        self.config = config or RankingConfig()
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self.now = now.astimezone(timezone.utc)
        self.now_ms = datetime_to_ms(self.now)
        self.velocity_cutoff_ms = self.now_ms - int(
            self.config.velocity_window.as_timedelta().total_seconds() * 1000
        )

    def recency_score(self, item: Any) -> float:
        record = as_record(item)
        stamp = resolve_first(record, "item.ranking_time", predicate=lambda v: coerce_timestamp_ms(v) > 0)
        if stamp is None:
            return 0.0
        elapsed_hours = (self.now_ms - coerce_timestamp_ms(stamp)) / MS_PER_HOUR
        window = math.floor(elapsed_hours / self.config.window_hours)
        return max(1.0 - window * self.config.window_decay, 0.0)

    def _event_activity_ms(self, event: Any) -> int:
        if isinstance(event, EventBlock):
            event = event.extras
        stamp = resolve_first(event, "event.activity", predicate=_truthy)
        return coerce_timestamp_ms(stamp)

    def velocity_score(self, item: Any) -> float:
        record = as_record(item)
        events = as_list(record.get("timeline"))
        recent = 0
        for event in events:
            millis = self._event_activity_ms(event)
            if millis and millis >= self.velocity_cutoff_ms:
                recent += 1
        saturation = max(self.config.velocity_saturation, 1)
        return min(recent / saturation, 1.0)

    def score(self, item: Any) -> float:
        return (
            self.config.recency_weight * self.recency_score(item)
            + self.config.velocity_weight * self.velocity_score(item)
        )

    def rank(self, items: Sequence[Any]) -> List[Any]:
        """Return ``items`` ordered by score, highest first."""

        scored = [(self.score(item), item) for item in items]
        scored.sort(key=lambda entry: entry[0], reverse=True)
        return [item for _, item in scored]


def score_content(
    item: Any,
    now: Optional[datetime] = None,
    config: Optional[RankingConfig] = None,
) -> float:
    """Relevance of one story or theme, in ``[0, 1]`` unless it is future-dated.

    Only meaningful relative to other items scored at the same moment.
    """

    if not is_present(item) and not hasattr(item, "to_dict"):
        return 0.0
    return ContentRanker(config, now).score(item)


__all__ = ["ContentRanker", "as_record", "score_content"]
