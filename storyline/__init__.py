"""Normalization and ranking of story and theme timelines."""

from .analysis import normalize_analysis
from .cache import StoryCache
from .config import PipelineConfig, RankingConfig, SimilarityConfig, TimeWindowConfig, load_config
from .content import ContentItem, normalize_content_item
from .headlines import latest_headlines
from .ranking import ContentRanker, score_content
from .sources import normalize_source, normalize_source_list
from .suggestions import build_suggestions, score_similarity
from .timeline import coerce_significance, normalize_timeline, normalize_timeline_report
from .timestamps import coerce_timestamp_ms

__all__ = [
    "ContentItem",
    "ContentRanker",
    "PipelineConfig",
    "RankingConfig",
    "SimilarityConfig",
    "StoryCache",
    "TimeWindowConfig",
    "build_suggestions",
    "coerce_significance",
    "coerce_timestamp_ms",
    "latest_headlines",
    "load_config",
    "normalize_analysis",
    "normalize_content_item",
    "normalize_source",
    "normalize_source_list",
    "normalize_timeline",
    "normalize_timeline_report",
    "score_content",
    "score_similarity",
]
