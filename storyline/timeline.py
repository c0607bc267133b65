"""Timeline block normalization.

Turns the raw ``timeline`` list of a story or theme into canonical
:class:`EventBlock` and :class:`ImageBlock` records. Input order is kept and
every block remembers its position in the raw list (``index``) so phase
ranges keep pointing at the right blocks. Image blocks without a URL are
dropped; nothing in here raises on malformed input.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .fields import (
    alias_keys,
    as_list,
    as_mapping,
    as_str,
    is_present,
    optional_str,
    resolve_first,
)
from .models import (
    DEFAULT_ASPECT_RATIO,
    FACT_CHECK_STATUSES,
    Diagnostic,
    EventBlock,
    FactCheck,
    ImageBlock,
    Media,
    Normalized,
    TimelineBlock,
)
from .sources import normalize_source_report
from .timestamps import coerce_timestamp_ms, timestamp_to_iso

LOGGER = logging.getLogger(__name__)

EVENT_KEYS = frozenset(
    {"type", "id", "index", "description", "significance", "sources", "faqs", "contexts"}
) | alias_keys(
    "event.title",
    "event.date",
    "event.media_type",
    "event.fact_status",
    "event.fact_note",
    "event.fact_updated_at",
)
IMAGE_KEYS = frozenset({"type", "id", "index", "caption"}) | alias_keys(
    "image.url", "image.aspect_ratio"
)
MEDIA_KEYS = frozenset({"type", "sourceIndex", "imageUrl"})

DEPTH_ESSENTIAL = 1
DEPTH_IMPORTANT = 2
DEPTH_FULL = 3
ORDERS = ("chronological", "reverse")


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _positive_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def coerce_significance(value: Any) -> int:
    """Clamp an editorial significance to 1, 2 or 3 (3 is most essential)."""

    if isinstance(value, bool):
        return 1
    if isinstance(value, str):
        value = value.strip()
    if value in (2, "2"):
        return 2
    if value in (3, "3"):
        return 3
    return 1


def _block_id(block: Mapping[str, Any], prefix: str, index: int) -> str:
    value = block.get("id")
    if isinstance(value, (str, int)) and not isinstance(value, bool) and str(value).strip():
        return str(value)
    return f"{prefix}-{index}"


def _extras(block: Mapping[str, Any], known: frozenset) -> dict:
    return {key: value for key, value in block.items() if key not in known}


def _normalize_image(
    block: Mapping[str, Any], index: int, diagnostics: List[Diagnostic]
) -> Optional[ImageBlock]:
    url = resolve_first(block, "image.url", predicate=_non_empty_str)
    if url is None:
        diagnostics.append(Diagnostic(path=f"timeline[{index}]", reason="image without url"))
        return None
    aspect_ratio = resolve_first(
        block, "image.aspect_ratio", predicate=_positive_number, default=DEFAULT_ASPECT_RATIO
    )
    return ImageBlock(
        index=index,
        id=_block_id(block, "img", index),
        image_url=url.strip(),
        caption=as_str(block.get("caption")),
        aspect_ratio=float(aspect_ratio),
        extras=_extras(block, IMAGE_KEYS),
    )


def _normalize_media(block: Mapping[str, Any]) -> Optional[Media]:
    media = block.get("media")
    media_type = resolve_first(block, "event.media_type", predicate=_non_empty_str)
    if isinstance(media, Mapping):
        source_index = media.get("sourceIndex")
        if not _positive_number(source_index):
            source_index = 0
        return Media(
            type=media_type,
            source_index=int(source_index),
            image_url=optional_str(media.get("imageUrl")),
            extras=_extras(media, MEDIA_KEYS),
        )
    if media_type is not None:
        return Media(type=media_type, source_index=0)
    return None


def _normalize_fact_check(block: Mapping[str, Any]) -> Optional[FactCheck]:
    status = resolve_first(block, "event.fact_status", predicate=_non_empty_str)
    if status is None:
        return None
    status = status.strip().lower()
    if status not in FACT_CHECK_STATUSES:
        return None
    return FactCheck(
        status=status,
        note=optional_str(resolve_first(block, "event.fact_note")),
        updated_at=coerce_timestamp_ms(resolve_first(block, "event.fact_updated_at")),
    )


def _normalize_event(
    block: Mapping[str, Any], index: int, diagnostics: List[Diagnostic]
) -> EventBlock:
    sources = normalize_source_report(block.get("sources"), path=f"timeline[{index}].sources")
    diagnostics.extend(sources.diagnostics)
    return EventBlock(
        index=index,
        id=_block_id(block, "evt", index),
        title=resolve_first(block, "event.title", predicate=_non_empty_str, default=""),
        description=as_str(block.get("description")),
        date=timestamp_to_iso(resolve_first(block, "event.date", predicate=is_present)),
        significance=coerce_significance(block.get("significance")),
        sources=sources.value,
        media=_normalize_media(block),
        faqs=as_list(block.get("faqs")),
        fact_check=_normalize_fact_check(block),
        contexts=as_list(block.get("contexts")),
        extras=_extras(block, EVENT_KEYS),
    )


def normalize_timeline_report(raw: Any) -> Normalized[List[TimelineBlock]]:
    """Normalize a raw timeline and report every dropped element."""

    if not isinstance(raw, (list, tuple)):
        return Normalized(value=[])

    blocks: List[TimelineBlock] = []
    diagnostics: List[Diagnostic] = []
    for index, entry in enumerate(raw):
        if isinstance(entry, (EventBlock, ImageBlock)):
            entry = entry.to_dict()
        block = as_mapping(entry)
        # Blocks normalized earlier carry their original position.
        carried = block.get("index")
        if isinstance(carried, int) and not isinstance(carried, bool) and carried >= 0:
            index = carried
        if block.get("type") == "image":
            image = _normalize_image(block, index, diagnostics)
            if image is not None:
                blocks.append(image)
        else:
            blocks.append(_normalize_event(block, index, diagnostics))
    return Normalized(value=blocks, diagnostics=diagnostics)


def normalize_timeline(raw: Any) -> List[TimelineBlock]:
    """Normalize a raw timeline into canonical blocks, preserving order."""

    report = normalize_timeline_report(raw)
    if report.dropped:
        LOGGER.debug("Dropped %d timeline elements during normalization", report.dropped)
    return report.value


def event_blocks(blocks: Iterable[TimelineBlock]) -> List[EventBlock]:
    return [block for block in blocks if isinstance(block, EventBlock)]


def filter_by_depth(blocks: Sequence[TimelineBlock], depth: int) -> List[TimelineBlock]:
    """Keep the events visible at a reading depth.

    Depth 1 shows only essential events (significance 3), depth 2 adds
    significance 2, depth 3 shows everything. Image blocks always stay.
    """

    if depth not in (DEPTH_ESSENTIAL, DEPTH_IMPORTANT, DEPTH_FULL):
        raise ValueError(f"unsupported depth: {depth!r}")
    threshold = {DEPTH_ESSENTIAL: 3, DEPTH_IMPORTANT: 2, DEPTH_FULL: 1}[depth]
    return [
        block
        for block in blocks
        if not isinstance(block, EventBlock) or block.significance >= threshold
    ]


def display_order(blocks: Sequence[TimelineBlock], order: str = "chronological") -> List[TimelineBlock]:
    if order not in ORDERS:
        raise ValueError(f"unsupported order: {order!r}")
    if order == "reverse":
        return list(reversed(blocks))
    return list(blocks)


__all__ = [
    "DEPTH_ESSENTIAL",
    "DEPTH_FULL",
    "DEPTH_IMPORTANT",
    "coerce_significance",
    "display_order",
    "event_blocks",
    "filter_by_depth",
    "normalize_timeline",
    "normalize_timeline_report",
]
