"""Pydantic schemas for request and response payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .feed import SORT_MODES


class TimelineRequest(BaseModel):
    timeline: Any = Field(None, description="Raw timeline list as stored in the document store")


class TimelineResponse(BaseModel):
    blocks: List[Dict[str, Any]]
    dropped: List[Dict[str, str]] = Field(
        default_factory=list, description="Elements removed during normalization and why"
    )


class AnalysisRequest(BaseModel):
    analysis: Any = None


class AnalysisResponse(BaseModel):
    analysis: Optional[Dict[str, Any]]


class HeadlinesRequest(BaseModel):
    timeline: Any = None
    limit: int = Field(2, ge=0, description="Maximum number of headlines")
    source_id: Optional[str] = None


class HeadlineResponse(BaseModel):
    id: str
    title: str
    dateLabel: str


class RankRequest(BaseModel):
    items: List[Dict[str, Any]]
    mode: str = Field("relevance", description="relevance, updated or published")
    category: str = "All"
    subcategory: str = "All"

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, value: str) -> str:
        if value not in SORT_MODES:
            raise ValueError(f"mode must be one of: {', '.join(SORT_MODES)}")
        return value


class RankedItem(BaseModel):
    id: Optional[str]
    score: float
    item: Dict[str, Any]


class SuggestionsRequest(BaseModel):
    base: Dict[str, Any]
    pool: List[Dict[str, Any]]
    limit: Optional[int] = Field(None, gt=0)


class SuggestionResponse(BaseModel):
    id: str
    score: float
    item: Dict[str, Any]


class SearchRequest(BaseModel):
    stories: List[Dict[str, Any]]
    query: str

    @field_validator("query")
    @classmethod
    def validate_query(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("query must not be empty")
        return cleaned


__all__ = [
    "AnalysisRequest",
    "AnalysisResponse",
    "HeadlineResponse",
    "HeadlinesRequest",
    "RankRequest",
    "RankedItem",
    "SearchRequest",
    "SuggestionResponse",
    "SuggestionsRequest",
    "TimelineRequest",
    "TimelineResponse",
]
