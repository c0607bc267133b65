"""FastAPI application exposing normalization and ranking over HTTP."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .analysis import normalize_analysis
from .config import PipelineConfig
from .feed import filter_feed, sort_feed
from .headlines import latest_headlines
from .ranking import ContentRanker
from .schemas import (
    AnalysisRequest,
    AnalysisResponse,
    HeadlineResponse,
    HeadlinesRequest,
    RankedItem,
    RankRequest,
    SearchRequest,
    SuggestionResponse,
    SuggestionsRequest,
    TimelineRequest,
    TimelineResponse,
)
from .search import search_stories
from .suggestions import item_id, rank_suggestions
from .timeline import normalize_timeline_report

LOGGER = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_app(
    config: Optional[PipelineConfig] = None,
    clock: Callable[[], datetime] = _utc_now,
) -> FastAPI:
    config = config or PipelineConfig()
    app = FastAPI(title="Storyline", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_config() -> PipelineConfig:
        return config

    @app.get("/healthz", summary="Health check")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/timeline/normalize", response_model=TimelineResponse)
    def normalize_timeline_endpoint(request: TimelineRequest) -> TimelineResponse:
        report = normalize_timeline_report(request.timeline)
        if report.dropped:
            LOGGER.info("Dropped %d timeline elements", report.dropped)
        return TimelineResponse(
            blocks=[block.to_dict() for block in report.value],
            dropped=[{"path": diag.path, "reason": diag.reason} for diag in report.diagnostics],
        )

    @app.post("/analysis/normalize", response_model=AnalysisResponse)
    def normalize_analysis_endpoint(request: AnalysisRequest) -> AnalysisResponse:
        analysis = normalize_analysis(request.analysis)
        return AnalysisResponse(analysis=analysis.to_dict() if analysis else None)

    @app.post("/headlines", response_model=List[HeadlineResponse])
    def headlines_endpoint(request: HeadlinesRequest) -> List[HeadlineResponse]:
        headlines = latest_headlines(request.timeline, limit=request.limit, source_id=request.source_id)
        return [HeadlineResponse(**headline.to_dict()) for headline in headlines]

    @app.post("/rank", response_model=List[RankedItem])
    def rank_endpoint(
        request: RankRequest,
        settings: PipelineConfig = Depends(get_config),
    ) -> List[RankedItem]:
        now = clock()
        try:
            items = filter_feed(request.items, request.category, request.subcategory)
            ordered = sort_feed(items, request.mode, now=now, config=settings.ranking)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        ranker = ContentRanker(settings.ranking, now)
        return [
            RankedItem(id=item_id(item), score=ranker.score(item), item=item)
            for item in ordered
        ]

    @app.post("/suggestions", response_model=List[SuggestionResponse])
    def suggestions_endpoint(
        request: SuggestionsRequest,
        settings: PipelineConfig = Depends(get_config),
    ) -> List[SuggestionResponse]:
        ranked = rank_suggestions(
            request.base,
            request.pool,
            limit=request.limit,
            now=clock(),
            config=settings.similarity,
        )
        return [
            SuggestionResponse(id=item_id(entry.item) or "", score=entry.score, item=entry.item)
            for entry in ranked
        ]

    @app.post("/search", response_model=List[dict])
    def search_endpoint(request: SearchRequest) -> List[dict]:
        return search_stories(request.stories, request.query)

    return app


__all__ = ["create_app"]
