"""Latest-headline extraction for card previews."""

from __future__ import annotations

from typing import Any, List, Optional

from .formatting import format_date_ddmmyyyy
from .models import Headline
from .timeline import event_blocks, normalize_timeline

UNTITLED = "Untitled update"


def latest_headlines(
    timeline: Any,
    limit: int = 2,
    source_id: Optional[str] = None,
) -> List[Headline]:
    """Return the ``limit`` most recent events of a timeline.

    Only event blocks are candidates; image blocks never become headlines.
    Events sort by date, newest first. An event without a usable date sorts
    by its position in the raw timeline instead, which puts it behind every
    dated event.
    """

    if limit <= 0:
        return []
    events = event_blocks(normalize_timeline(timeline))
    ranked = sorted(
        events,
        key=lambda event: event.date_ms or event.index,
        reverse=True,
    )[:limit]

    headlines: List[Headline] = []
    for rank, event in enumerate(ranked):
        prefix = source_id or event.title or "headline"
        headlines.append(
            Headline(
                id=f"{prefix}-{rank}-{event.index}",
                title=event.title.strip() or UNTITLED,
                date_label=format_date_ddmmyyyy(event.date),
                date=event.date,
                index=event.index,
            )
        )
    return headlines


__all__ = ["latest_headlines"]
