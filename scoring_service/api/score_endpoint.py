"""
POST /v1/score/evaluate   → score an application record
POST /v1/score/review     → mark metadata reviewed (now) and rescore
GET  /v1/score/health     → health check

Stateless: the caller sends the full application record every time and
is responsible for persisting metadataLastReviewed and for authorization.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends

from scoring_service.core.config import get_settings
from scoring_service.core.dependencies import get_scoring_tables, get_table_store
from scoring_service.core.metrics import SCORE_EVALUATIONS, SCORE_LATENCY, SCORE_TOTAL
from scoring_service.schemas.application_record import ApplicationRecord
from scoring_service.schemas.score_response import MarkReviewedResponse, ScoreResult
from scoring_service.scoring.engine import compute_application_score
from scoring_service.scoring.loader import ScoringTableStore
from scoring_service.scoring.tables import ScoringTables

logger = structlog.get_logger()
router = APIRouter(prefix="/v1/score", tags=["score"])


def _score(record: dict, tables: ScoringTables, endpoint: str, now: datetime | None = None) -> ScoreResult:
    t0 = time.perf_counter()
    result = compute_application_score(record, tables, now=now)
    SCORE_LATENCY.observe(time.perf_counter() - t0)
    SCORE_TOTAL.observe(result.total_score)
    SCORE_EVALUATIONS.labels(endpoint=endpoint, outcome="ok").inc()

    logger.info(
        "application_scored",
        endpoint=endpoint,
        application_id=record.get("id"),
        total_score=result.total_score,
        rating=result.rating.value,
    )
    return result


@router.post(
    "/evaluate",
    response_model=ScoreResult,
    summary="Compute the security score of an application",
    description="Knowledge sharing (0-50) + tool usage (0-50) with a full breakdown.",
)
async def evaluate_score(
    application: ApplicationRecord,
    tables: ScoringTables = Depends(get_scoring_tables),
) -> ScoreResult:
    return _score(application.as_record(), tables, "evaluate")


@router.post(
    "/review",
    response_model=MarkReviewedResponse,
    summary="Mark application metadata as reviewed and rescore",
)
async def mark_reviewed(
    application: ApplicationRecord,
    tables: ScoringTables = Depends(get_scoring_tables),
) -> MarkReviewedResponse:
    now = datetime.now(timezone.utc)
    record = application.as_record()
    record["metadataLastReviewed"] = now

    scores = _score(record, tables, "review", now=now)
    return MarkReviewedResponse(
        application=record,
        scores=scores,
        message="Application metadata marked as reviewed",
    )


@router.get("/health", tags=["health"])
async def health(store: ScoringTableStore = Depends(get_table_store)):
    settings = get_settings()
    body = {
        "status": "ok" if store.is_loaded else "degraded",
        "service": settings.app_name,
        "model_version": settings.scoring_model_version,
    }
    if store.last_error:
        body["error"] = store.last_error
    return body
