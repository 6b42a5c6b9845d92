"""
FastAPI dependencies for the scoring tables.

The store is created once per process. Scoring endpoints answer 503 while
no valid tables are loaded.
"""
from __future__ import annotations

from functools import lru_cache

import structlog
from fastapi import Depends, HTTPException

from scoring_service.core.config import get_settings
from scoring_service.core.metrics import SCORE_EVALUATIONS
from scoring_service.scoring.loader import ScoringTableStore
from scoring_service.scoring.tables import ConfigurationError, ScoringTables

logger = structlog.get_logger()


@lru_cache
def get_table_store() -> ScoringTableStore:
    return ScoringTableStore(get_settings().scoring_tables_dir)


def get_scoring_tables(store: ScoringTableStore = Depends(get_table_store)) -> ScoringTables:
    try:
        return store.get()
    except ConfigurationError as e:
        SCORE_EVALUATIONS.labels(endpoint="any", outcome="unavailable").inc()
        logger.warning("scoring_unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=f"Scoring unavailable: {e}")
