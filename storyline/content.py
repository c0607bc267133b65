"""Assembly of a whole story or theme record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .analysis import normalize_analysis
from .fields import alias_keys, as_list, as_mapping, as_str, optional_str, resolve_first
from .models import Analysis, Phase, TimelineBlock
from .phases import resolve_phases
from .timeline import normalize_timeline
from .timestamps import coerce_timestamp_ms, ms_to_iso

CONTENT_KEYS = frozenset(
    {
        "title",
        "category",
        "allCategories",
        "subcategory",
        "secondarySubcategories",
        "tags",
        "imageUrl",
        "createdAt",
        "updatedAt",
        "publishedAt",
        "timeline",
        "analysis",
        "phases",
    }
) | alias_keys("item.id", "item.kind", "item.overview")


def _strings(raw: Any) -> List[str]:
    return [str(entry) for entry in as_list(raw) if entry]


@dataclass
class ContentItem:
    """A story or theme with every nested structure normalized."""

    id: Optional[str]
    kind: str = "story"
    title: str = ""
    overview: str = ""
    category: str = ""
    all_categories: List[str] = field(default_factory=list)
    subcategory: str = ""
    secondary_subcategories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    created_at: int = 0
    updated_at: int = 0
    published_at: int = 0
    timeline: List[TimelineBlock] = field(default_factory=list)
    analysis: Optional[Analysis] = None
    phases: List[Phase] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, raw: Any) -> "ContentItem":
        record: Mapping[str, Any] = as_mapping(raw)
        item_id = resolve_first(record, "item.id", predicate=bool)
        kind = resolve_first(record, "item.kind", predicate=lambda v: isinstance(v, str) and bool(v))
        raw_timeline = record.get("timeline")
        timeline = normalize_timeline(raw_timeline)
        return cls(
            id=str(item_id) if item_id is not None else None,
            kind=kind or "story",
            title=as_str(record.get("title")),
            overview=as_str(resolve_first(record, "item.overview", predicate=bool, default="")),
            category=as_str(record.get("category")),
            all_categories=_strings(record.get("allCategories")),
            subcategory=as_str(record.get("subcategory")),
            secondary_subcategories=_strings(record.get("secondarySubcategories")),
            tags=_strings(record.get("tags")),
            image_url=optional_str(record.get("imageUrl")),
            created_at=coerce_timestamp_ms(record.get("createdAt")),
            updated_at=coerce_timestamp_ms(record.get("updatedAt")),
            published_at=coerce_timestamp_ms(record.get("publishedAt")),
            timeline=timeline,
            analysis=normalize_analysis(record.get("analysis")),
            # Phase indices address the raw timeline, dropped blocks included.
            phases=resolve_phases(
                record.get("phases"),
                len(raw_timeline) if isinstance(raw_timeline, (list, tuple)) else 0,
            ),
            extras={key: value for key, value in record.items() if key not in CONTENT_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extras)
        payload.update(
            {
                "id": self.id,
                "type": self.kind,
                "title": self.title,
                "overview": self.overview,
                "category": self.category,
                "allCategories": list(self.all_categories),
                "subcategory": self.subcategory,
                "secondarySubcategories": list(self.secondary_subcategories),
                "tags": list(self.tags),
                "imageUrl": self.image_url,
                "createdAt": ms_to_iso(self.created_at) or None,
                "updatedAt": ms_to_iso(self.updated_at) or None,
                "publishedAt": ms_to_iso(self.published_at) or None,
                "timeline": [block.to_dict() for block in self.timeline],
                "analysis": self.analysis.to_dict() if self.analysis else None,
                "phases": [phase.to_dict() for phase in self.phases],
            }
        )
        return payload


def normalize_content_item(raw: Any) -> ContentItem:
    return ContentItem.from_record(raw)


__all__ = ["ContentItem", "normalize_content_item"]
