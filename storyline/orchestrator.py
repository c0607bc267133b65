"""Batch pipeline: normalize an export of stories and themes, rank, write a feed."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from .config import PipelineConfig
from .content import ContentItem
from .headlines import latest_headlines
from .progress import PipelineProgress
from .ranking import ContentRanker
from .suggestions import rank_suggestions

if TYPE_CHECKING:
    from .progress import StageHandle

LOGGER = logging.getLogger(__name__)

COLLECTIONS = (("stories", "story"), ("themes", "theme"))


def load_export(path: Path) -> List[Dict[str, Any]]:
    """Read a document-store export.

    Accepts ``{"stories": [...], "themes": [...]}`` or a bare list of
    records. Records from a named collection get its kind unless they
    already carry a ``type``.
    """

    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    raw = json.loads(path.read_text(encoding="utf-8"))
    records: List[Dict[str, Any]] = []
    if isinstance(raw, list):
        records.extend(entry for entry in raw if isinstance(entry, dict))
    elif isinstance(raw, dict):
        for key, kind in COLLECTIONS:
            for entry in raw.get(key) or []:
                if isinstance(entry, dict):
                    records.append({"type": kind, **entry})
    else:
        raise ValueError("export must be a list of records or a mapping of collections")
    return records


class FeedPipelineOrchestrator:
    """Run normalization, ranking, headlines and suggestions over an export."""

    def __init__(
        self,
        config: PipelineConfig,
        now: Optional[datetime] = None,
        show_progress: bool = True,
    ) -> None:
        self.config = config
        self.now = now or datetime.now(timezone.utc)
        self.show_progress = show_progress
        self.ranker = ContentRanker(config.ranking, self.now)

    def run(self) -> List[Dict[str, Any]]:
        input_path = self.config.input.path
        with PipelineProgress(enabled=self.show_progress) as progress:
            with progress.stage("Load") as stage:
                stage.set_total(1)
                raw_records = load_export(input_path)
                stage.advance(1)
            LOGGER.info("Loaded %d records from %s", len(raw_records), input_path)

            with progress.stage("Normalize") as stage:
                items = self._normalize(raw_records, stage=stage)

            with progress.stage("Rank") as stage:
                scored = self._score(items, stage=stage)

            with progress.stage("Suggestions") as stage:
                suggestions = self._suggest(items, stage=stage)

            with progress.stage("Output") as stage:
                stage.set_total(len(items) + 1)
                output = self._build_output(items, scored, suggestions, stage=stage)
                self._write_output(output)
                stage.advance(1)

        LOGGER.debug("Records per stage: %s", progress.counts)
        LOGGER.info("Wrote %d ranked items to %s", len(output), self.config.output.path)
        return output

    def _normalize(
        self,
        raw_records: Sequence[Dict[str, Any]],
        stage: Optional["StageHandle"] = None,
    ) -> List[Tuple[ContentItem, Dict[str, Any]]]:
        if stage is not None:
            stage.set_total(len(raw_records))
        items: List[Tuple[ContentItem, Dict[str, Any]]] = []
        for raw in raw_records:
            item = ContentItem.from_record(raw)
            if item.id is None:
                LOGGER.debug("Record without id will not take part in suggestions: %r", item.title)
            items.append((item, item.to_dict()))
            if stage is not None:
                stage.advance(1)
        return items

    def _score(
        self,
        items: Sequence[Tuple[ContentItem, Dict[str, Any]]],
        stage: Optional["StageHandle"] = None,
    ) -> List[Dict[str, float]]:
        if stage is not None:
            stage.set_total(len(items))
        scores: List[Dict[str, float]] = []
        for _, record in items:
            recency = self.ranker.recency_score(record)
            velocity = self.ranker.velocity_score(record)
            scores.append(
                {
                    "recency": recency,
                    "velocity": velocity,
                    "score": self.ranker.score(record),
                }
            )
            if stage is not None:
                stage.advance(1)
        return scores

    def _suggest(
        self,
        items: Sequence[Tuple[ContentItem, Dict[str, Any]]],
        stage: Optional["StageHandle"] = None,
    ) -> List[List[str]]:
        if stage is not None:
            stage.set_total(len(items))
        pools: Dict[str, List[Dict[str, Any]]] = {}
        for item, record in items:
            pools.setdefault(item.kind, []).append(record)

        results: List[List[str]] = []
        for item, record in items:
            ranked = rank_suggestions(
                record,
                pools.get(item.kind, []),
                now=self.now,
                config=self.config.similarity,
            )
            results.append([str(entry.item["id"]) for entry in ranked])
            if stage is not None:
                stage.advance(1)
        return results

    def _build_output(
        self,
        items: Sequence[Tuple[ContentItem, Dict[str, Any]]],
        scores: Sequence[Dict[str, float]],
        suggestions: Sequence[List[str]],
        stage: Optional["StageHandle"] = None,
    ) -> List[Dict[str, Any]]:
        payload: List[Dict[str, Any]] = []
        for (item, record), score, suggested in zip(items, scores, suggestions):
            headlines = latest_headlines(
                item.timeline,
                limit=self.config.headlines.limit,
                source_id=item.id,
            )
            payload.append(
                {
                    "id": item.id,
                    "type": item.kind,
                    "title": item.title,
                    "category": item.category,
                    "updatedAt": record.get("updatedAt"),
                    "recency": round(float(score["recency"]), 6),
                    "velocity": round(float(score["velocity"]), 6),
                    "score": round(float(score["score"]), 6),
                    "headlines": [headline.to_dict() for headline in headlines],
                    "suggestions": suggested,
                }
            )
            if stage is not None:
                stage.advance(1)

        payload.sort(key=lambda entry: entry["score"], reverse=True)
        return payload

    def _write_output(self, data: Sequence[Dict[str, Any]]) -> None:
        path = self.config.output.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def run_from_config(path: Path, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    config = PipelineConfig.from_yaml(path)
    orchestrator = FeedPipelineOrchestrator(config, now=now)
    return orchestrator.run()


__all__ = ["FeedPipelineOrchestrator", "load_export", "run_from_config"]
