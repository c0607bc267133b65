"""Canonical data models produced by the normalizers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Generic, List, Optional, TypeVar, Union

from .timestamps import coerce_timestamp_ms, ms_to_iso

FACT_CHECK_STATUSES = ("consensus", "debated", "partially_debated")
DEFAULT_ASPECT_RATIO = 16 / 9
DEFAULT_PROVIDER = "manual"

T = TypeVar("T")


@dataclass
class Source:
    """A reference to a published article backing a timeline event."""

    link: str
    title: str = ""
    source_name: str = ""
    image_url: Optional[str] = None
    pub_date: Optional[str] = None
    provider: str = DEFAULT_PROVIDER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "sourceName": self.source_name,
            "imageUrl": self.image_url,
            "pubDate": self.pub_date,
            "provider": self.provider,
        }


@dataclass
class Media:
    """How an event presents its media: which source's image, shown how."""

    type: Optional[str]
    source_index: int = 0
    image_url: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extras)
        payload.update(
            {
                "type": self.type,
                "imageUrl": self.image_url,
                "sourceIndex": self.source_index,
            }
        )
        return payload


@dataclass
class FactCheck:
    status: str
    note: Optional[str] = None
    updated_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "note": self.note,
            "updatedAt": ms_to_iso(self.updated_at) or None,
        }


@dataclass
class EventBlock:
    """A dated development in a story's timeline."""

    type: ClassVar[str] = "event"

    index: int
    id: str
    title: str = ""
    description: str = ""
    date: str = ""
    significance: int = 1
    sources: List[Source] = field(default_factory=list)
    media: Optional[Media] = None
    faqs: List[Any] = field(default_factory=list)
    fact_check: Optional[FactCheck] = None
    contexts: List[Any] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def date_ms(self) -> int:
        return coerce_timestamp_ms(self.date)

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extras)
        payload.update(
            {
                "type": self.type,
                "id": self.id,
                "index": self.index,
                "title": self.title,
                "description": self.description,
                "date": self.date,
                "significance": self.significance,
                "sources": [source.to_dict() for source in self.sources],
                "media": self.media.to_dict() if self.media else None,
                "faqs": list(self.faqs),
                "factCheck": self.fact_check.to_dict() if self.fact_check else None,
                "contexts": list(self.contexts),
            }
        )
        return payload


@dataclass
class ImageBlock:
    """A standalone image placed between timeline events."""

    type: ClassVar[str] = "image"

    index: int
    id: str
    image_url: str
    caption: str = ""
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extras)
        payload.update(
            {
                "type": self.type,
                "id": self.id,
                "index": self.index,
                "imageUrl": self.image_url,
                "caption": self.caption,
                "aspectRatio": self.aspect_ratio,
            }
        )
        return payload


TimelineBlock = Union[EventBlock, ImageBlock]


@dataclass
class Analysis:
    """Stakeholders, FAQs and open questions attached to a story or theme."""

    stakeholders: List[Any] = field(default_factory=list)
    faqs: List[Any] = field(default_factory=list)
    future: List[Any] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_content(self) -> bool:
        return bool(self.stakeholders or self.faqs or self.future)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "stakeholders": list(self.stakeholders),
            "faqs": list(self.faqs),
            "future": list(self.future),
        }
        payload.update(self.extras)
        return payload


@dataclass
class Phase:
    """A named run of consecutive timeline blocks."""

    start_index: int
    end_index: int
    accent_color: str
    title: str = ""
    description: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def contains(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extras)
        payload.update(
            {
                "startIndex": self.start_index,
                "endIndex": self.end_index,
                "accentColor": self.accent_color,
                "title": self.title,
                "description": self.description,
            }
        )
        return payload


@dataclass
class Headline:
    """A preview line for a content card."""

    id: str
    title: str
    date_label: str
    date: str = ""
    index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "dateLabel": self.date_label}


@dataclass
class Diagnostic:
    """Why an element was dropped during normalization."""

    path: str
    reason: str


@dataclass
class Normalized(Generic[T]):
    """A normalized value together with what was dropped to produce it."""

    value: T
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def dropped(self) -> int:
        return len(self.diagnostics)


__all__ = [
    "Analysis",
    "DEFAULT_ASPECT_RATIO",
    "DEFAULT_PROVIDER",
    "Diagnostic",
    "EventBlock",
    "FACT_CHECK_STATUSES",
    "FactCheck",
    "Headline",
    "ImageBlock",
    "Media",
    "Normalized",
    "Phase",
    "Source",
    "TimelineBlock",
]
