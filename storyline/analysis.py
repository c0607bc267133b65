"""Analysis block normalization."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .fields import alias_keys, as_list, resolve_first
from .models import Analysis

ANALYSIS_KEYS = frozenset({"stakeholders", "faqs"}) | alias_keys("analysis.future")


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def normalize_analysis(raw: Any) -> Optional[Analysis]:
    """Canonicalize an analysis sub-document.

    Returns ``None`` when there is no analysis at all, which callers treat
    differently from an analysis whose lists are all empty. ``future`` falls
    back to the legacy ``futureQuestions`` list when missing or empty, and
    unknown keys are carried through untouched.
    """

    if isinstance(raw, Analysis):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        return None
    return Analysis(
        stakeholders=as_list(raw.get("stakeholders")),
        faqs=as_list(raw.get("faqs")),
        future=as_list(resolve_first(raw, "analysis.future", predicate=_non_empty_list)),
        extras={key: value for key, value in raw.items() if key not in ANALYSIS_KEYS},
    )


__all__ = ["normalize_analysis"]
