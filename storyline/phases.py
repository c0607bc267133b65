"""Phase ranges over a story timeline."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

from .fields import alias_keys, as_mapping, as_str, optional_str, resolve_first
from .models import Phase

PHASE_PALETTE = (
    "#EF4444",
    "#3B82F6",
    "#FACC15",
    "#22C55E",
    "#F97316",
    "#A855F7",
    "#14B8A6",
    "#EC4899",
    "#6366F1",
)
PHASE_KEYS = frozenset({"startIndex", "endIndex", "title", "description"}) | alias_keys(
    "phase.accent"
)


def _index(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def resolve_phases(raw_phases: Any, timeline_length: int) -> List[Phase]:
    """Resolve CMS phase entries against a timeline of ``timeline_length``.

    Start and end are clamped into the timeline; a missing end runs up to
    the block before the next phase starts, or to the last block. Phases
    without a colour take one from :data:`PHASE_PALETTE` by position.
    """

    entries = [as_mapping(entry) for entry in raw_phases] if isinstance(raw_phases, (list, tuple)) else []
    last = max(timeline_length - 1, 0)
    phases: List[Phase] = []
    for idx, phase in enumerate(entries):
        accent = resolve_first(phase, "phase.accent", predicate=lambda v: isinstance(v, str) and bool(v))
        if accent is None:
            accent = PHASE_PALETTE[idx % len(PHASE_PALETTE)]

        next_start = _index(entries[idx + 1].get("startIndex")) if idx + 1 < len(entries) else None
        fallback_end = next_start - 1 if next_start is not None else last
        provided_end = _index(phase.get("endIndex"))
        end = provided_end if provided_end is not None else fallback_end

        start = min(max(_index(phase.get("startIndex")) or 0, 0), last)
        end = max(start, min(last, end))

        phases.append(
            Phase(
                start_index=start,
                end_index=end,
                accent_color=accent,
                title=as_str(phase.get("title")),
                description=optional_str(phase.get("description")),
                extras={key: value for key, value in phase.items() if key not in PHASE_KEYS},
            )
        )
    return phases


def phase_start_lookup(phases: Sequence[Phase]) -> Dict[int, Phase]:
    """Map a block index to the phase whose header is drawn above it."""

    return {phase.start_index: phase for phase in phases}


def phase_range_lookup(phases: Sequence[Phase]) -> Dict[int, Phase]:
    lookup: Dict[int, Phase] = {}
    for phase in phases:
        for idx in range(phase.start_index, phase.end_index + 1):
            lookup[idx] = phase
    return lookup


__all__ = ["PHASE_PALETTE", "phase_range_lookup", "phase_start_lookup", "resolve_phases"]
