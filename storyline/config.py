"""Configuration helpers for the storyline ranking and pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional
import os
import re

import yaml

DURATION_PATTERN = re.compile(r"^(\d+)\s*([smhdw])$")
DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days", "w": "weeks"}


@dataclass
class TimeWindowConfig:
    """A duration written as ``"48h"``, ``"120d"`` and so on."""

    since: str = "48h"

    def as_timedelta(self) -> timedelta:
        match = DURATION_PATTERN.match(self.since.strip().lower())
        if match is None:
            raise ValueError(f"invalid time window value: {self.since!r}")
        amount, unit = match.groups()
        return timedelta(**{DURATION_UNITS[unit]: int(amount)})


@dataclass
class RankingConfig:
    """Weights for the feed relevance score."""

    recency_weight: float = 0.4
    velocity_weight: float = 0.6
    window_hours: float = 4.0
    window_decay: float = 0.1
    velocity_window: TimeWindowConfig = field(default_factory=TimeWindowConfig)
    velocity_saturation: int = 5


@dataclass
class SimilarityConfig:
    """Weights for "continue reading" suggestions."""

    tag_weight: float = 3.0
    category_weight: float = 4.0
    recency_weight: float = 3.0
    recency_horizon: TimeWindowConfig = field(
        default_factory=lambda: TimeWindowConfig(since="120d")
    )
    limit: int = 5


@dataclass
class HeadlineConfig:
    limit: int = 2


@dataclass
class InputConfig:
    path: Path = Path("data/content_export.json")


@dataclass
class OutputConfig:
    path: Path = Path("data/ranked_feed.json")


@dataclass
class PipelineConfig:
    """Top-level configuration for the batch pipeline and HTTP wrapper."""

    ranking: RankingConfig = field(default_factory=RankingConfig)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    headlines: HeadlineConfig = field(default_factory=HeadlineConfig)
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "PipelineConfig":
        raw = raw or {}
        if not isinstance(raw, dict):
            raise ValueError("configuration root must be a mapping")

        ranking_raw = dict(raw.get("ranking") or {})
        if "velocity_window" in ranking_raw:
            ranking_raw["velocity_window"] = TimeWindowConfig(
                since=str(ranking_raw["velocity_window"])
            )
        similarity_raw = dict(raw.get("similarity") or {})
        if "recency_horizon" in similarity_raw:
            similarity_raw["recency_horizon"] = TimeWindowConfig(
                since=str(similarity_raw["recency_horizon"])
            )

        input_raw = raw.get("input") or {}
        output_raw = raw.get("output") or {}
        api_raw = raw.get("api") or {}

        try:
            config = cls(
                ranking=RankingConfig(**ranking_raw),
                similarity=SimilarityConfig(**similarity_raw),
                headlines=HeadlineConfig(**(raw.get("headlines") or {})),
                input=InputConfig(path=Path(input_raw.get("path", InputConfig.path))),
                output=OutputConfig(path=Path(output_raw.get("path", OutputConfig.path))),
                api_host=str(api_raw.get("host", "0.0.0.0")),
                api_port=int(api_raw.get("port", 8080)),
            )
        except TypeError as exc:
            raise ValueError(f"unknown configuration key: {exc}") from exc

        # Fail early on malformed durations.
        config.ranking.velocity_window.as_timedelta()
        config.similarity.recency_horizon.as_timedelta()
        return config

    @classmethod
    def from_yaml(cls, path: Path | str) -> "PipelineConfig":
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        config = cls.from_dict(raw)

        # Relative data paths are resolved against the config file location.
        base = path.parent
        if not config.input.path.is_absolute():
            config.input.path = (base / config.input.path).resolve()
        if not config.output.path.is_absolute():
            config.output.path = (base / config.output.path).resolve()
        return config


def load_config() -> PipelineConfig:
    """Load configuration from environment variables with sensible defaults."""

    config_path = os.getenv("STORYLINE_CONFIG")
    if config_path:
        config = PipelineConfig.from_yaml(config_path)
    else:
        config = PipelineConfig()

    input_path = os.getenv("STORYLINE_INPUT")
    if input_path:
        config.input.path = Path(input_path).expanduser()
    output_path = os.getenv("STORYLINE_OUTPUT")
    if output_path:
        config.output.path = Path(output_path).expanduser()
    velocity_window = os.getenv("STORYLINE_VELOCITY_WINDOW")
    if velocity_window:
        config.ranking.velocity_window = TimeWindowConfig(since=velocity_window)
        config.ranking.velocity_window.as_timedelta()
    config.api_host = os.getenv("API_HOST", config.api_host)
    config.api_port = int(os.getenv("PORT", str(config.api_port)))
    return config


__all__ = [
    "HeadlineConfig",
    "InputConfig",
    "OutputConfig",
    "PipelineConfig",
    "RankingConfig",
    "SimilarityConfig",
    "TimeWindowConfig",
    "load_config",
]
