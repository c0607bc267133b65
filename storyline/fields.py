"""Legacy field aliases for content records.

Records in the document store were written by several generations of the
editorial tooling, so the same value can live under different keys. Every
alias is listed once in :data:`FIELD_ALIASES`; readers call
:func:`resolve_first` with the logical field name instead of probing keys by
hand. Keys may be dotted paths (``"media.type"``, ``"allCategories.0"``).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    # content items
    "item.id": ("id", "docId"),
    "item.kind": ("type", "kind"),
    "item.overview": ("overview", "description"),
    "item.ranking_time": ("createdAt", "updatedAt"),
    "item.similarity_time": ("updatedAt", "publishedAt", "createdAt", "timestamp"),
    "item.feed_time": ("updatedAt", "publishedAt", "createdAt"),
    "item.primary_category": (
        "category",
        "allCategories.0",
        "primaryCategory",
        "categories.0",
    ),
    # timeline blocks
    "image.url": ("url", "imageUrl"),
    "image.aspect_ratio": ("aspectRatio", "aspect_ratio"),
    "event.title": ("title", "event"),
    "event.date": ("date", "timestamp", "startedAt"),
    "event.media_type": ("media.type", "displayMode"),
    "event.fact_status": ("factCheck.status", "factStatus"),
    "event.fact_note": ("factCheck.note", "factNote"),
    "event.fact_updated_at": ("factCheck.updatedAt", "factUpdatedAt"),
    "event.activity": ("updatedAt", "createdAt"),
    # sources
    "source.name": ("sourceName", "siteName"),
    # analysis
    "analysis.future": ("future", "futureQuestions"),
    # phases
    "phase.accent": ("accentColor", "color"),
    # database timestamp wrappers
    "timestamp.seconds": ("seconds", "_seconds"),
    "timestamp.nanoseconds": ("nanoseconds", "_nanoseconds"),
}


def is_present(value: Any) -> bool:
    """Return True for values that count as "set" in a content record."""

    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def lookup(record: Any, path: str) -> Any:
    """Follow a dotted ``path`` through mappings and lists.

    Returns ``None`` when any step is missing. Attribute access is used for
    non-mapping objects so database wrapper types resolve too.
    """

    current = record
    for part in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, (list, tuple)):
            if not part.isdigit():
                return None
            idx = int(part)
            current = current[idx] if idx < len(current) else None
        else:
            current = getattr(current, part, None)
    return current


def resolve_first(
    record: Any,
    name: str,
    predicate: Callable[[Any], bool] = is_present,
    default: Any = None,
) -> Any:
    """Return the first aliased value of ``name`` accepted by ``predicate``."""

    try:
        keys = FIELD_ALIASES[name]
    except KeyError:
        raise KeyError(f"unknown field alias: {name}") from None
    for key in keys:
        value = lookup(record, key)
        if predicate(value):
            return value
    return default


def alias_keys(*names: str) -> frozenset:
    """Top-level keys consumed by the given logical fields."""

    keys = set()
    for name in names:
        for path in FIELD_ALIASES[name]:
            keys.add(path.split(".", 1)[0])
    return frozenset(keys)


def as_mapping(raw: Any) -> Mapping[str, Any]:
    """Treat anything that is not a mapping as an empty record."""

    return raw if isinstance(raw, Mapping) else {}


def as_list(raw: Any) -> list:
    return list(raw) if isinstance(raw, (list, tuple)) else []


def as_str(raw: Any, default: str = "") -> str:
    return raw if isinstance(raw, str) else default


def optional_str(raw: Any) -> Optional[str]:
    if isinstance(raw, str) and raw.strip():
        return raw
    return None


__all__ = [
    "FIELD_ALIASES",
    "alias_keys",
    "as_list",
    "as_mapping",
    "as_str",
    "is_present",
    "lookup",
    "optional_str",
    "resolve_first",
]
