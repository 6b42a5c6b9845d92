"""
Scoring table endpoints.

  GET  /v1/config/integration-levels  → select options for the application form
  POST /v1/config/reload              → reload tables from disk (atomic swap)
"""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException

from scoring_service.core.dependencies import get_scoring_tables, get_table_store
from scoring_service.scoring.loader import ScoringTableStore
from scoring_service.scoring.tables import ConfigurationError, ScoringTables

logger = structlog.get_logger()
router = APIRouter(prefix="/v1/config", tags=["config"])


@router.get("/integration-levels")
async def list_integration_levels(tables: ScoringTables = Depends(get_scoring_tables)):
    return tables.integration_levels.options()


@router.post("/reload")
async def reload_tables(store: ScoringTableStore = Depends(get_table_store)):
    try:
        tables = store.reload()
    except ConfigurationError as e:
        # previous tables (if any) stay active
        raise HTTPException(status_code=503, detail=f"Scoring tables invalid: {e}")

    logger.info("scoring_tables_reloaded")
    return {
        "status": "reloaded",
        "integration_levels": len(tables.integration_levels.levels),
        "classified_tools": len(tables.tool_quality.classification),
        "risk_factors": len(tables.risk_factors.facing) + len(tables.risk_factors.data_types),
    }
