"""
Application Security Score Engine

Orchestrates:
  1. Risk weight (exposure + sensitive data, max not product)
  2. Tool usage score (0-50, risk-adjusted, normalized)
  3. Knowledge sharing score (0-50, completeness + review recency)
  4. Total score (0-100) + rating
  5. Breakdown for audit

Pure function of the application record, the scoring tables and `now`.
Never raises on application data; missing or malformed fields score zero.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

import structlog

from scoring_service.schemas.score_response import (
    KnowledgeSharingBreakdown,
    RiskFactorBreakdown,
    ScoreBreakdown,
    ScoreRating,
    ScoreResult,
    ToolCategoryBreakdown,
    ToolUsageBreakdown,
)
from scoring_service.scoring.knowledge import compute_knowledge_score
from scoring_service.scoring.risk import resolve_risk_factors
from scoring_service.scoring.tables import ScoringTables
from scoring_service.scoring.tools import compute_tool_score

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════
# Rating thresholds (same bands as the portfolio score card)
#   score >= 76  → Excellent
#   score >= 51  → Good
#   otherwise    → Needs Improvement
# ═══════════════════════════════════════════════════════════════
RATING_THRESHOLDS = [
    (76.0, ScoreRating.EXCELLENT),
    (51.0, ScoreRating.GOOD),
]


def rate(total_score: float) -> ScoreRating:
    for threshold, rating in RATING_THRESHOLDS:
        if total_score >= threshold:
            return rating
    return ScoreRating.NEEDS_IMPROVEMENT


def compute_application_score(
    app: Mapping[str, Any],
    tables: ScoringTables,
    now: Optional[datetime] = None,
) -> ScoreResult:
    """
    Main scoring entry point.
    """
    # ── Step 1: Risk weight ──
    risk = resolve_risk_factors(app, tables.risk_factors)

    # ── Step 2: Tool usage ──
    tools = compute_tool_score(app, tables.integration_levels, tables.tool_quality, risk.weight)

    # ── Step 3: Knowledge sharing (independent of risk) ──
    knowledge = compute_knowledge_score(app, now)

    # ── Step 4: Totals ──
    knowledge_score = round(knowledge.score, 2)
    tool_score = round(tools.score, 2)
    total_score = knowledge_score + tool_score
    rating = rate(total_score)

    logger.debug(
        "application_score_computed",
        application_id=app.get("id"),
        knowledge_score=knowledge_score,
        tool_score=tool_score,
        total_score=total_score,
        risk_weight=risk.weight,
    )

    return ScoreResult(
        knowledge_score=knowledge_score,
        tool_score=tool_score,
        total_score=total_score,
        rating=rating,
        breakdown=ScoreBreakdown(
            knowledge_sharing=KnowledgeSharingBreakdown(
                fields_filled=knowledge.fields_filled,
                total_fields=knowledge.total_fields,
                completeness_score=knowledge.completeness_score,
                review_score=knowledge.review_score,
                last_reviewed=knowledge.last_reviewed,
                review_window_start=knowledge.review_window_start,
            ),
            tool_usage=ToolUsageBreakdown(
                total_achieved=round(tools.total_achieved, 4),
                total_possible=round(tools.total_possible, 4),
                risk_weight=tools.risk_weight,
                categories=[
                    ToolCategoryBreakdown(
                        category=c.key,
                        label=c.label,
                        tool=c.tool,
                        tool_class=c.tool_class,
                        integration_level=c.integration_level,
                        not_applicable=c.not_applicable,
                        configured=c.configured,
                        base_points=c.base_points,
                        risk_weight=c.risk_weight,
                        integration_weight=c.integration_weight,
                        tool_quality_weight=c.tool_quality_weight,
                        possible_points=round(c.possible_points, 4),
                        achieved_points=round(c.achieved_points, 4),
                    )
                    for c in tools.categories
                ],
            ),
            risk_factors=[
                RiskFactorBreakdown(source=m.source, factor=m.factor, multiplier=m.multiplier)
                for m in risk.matched
            ],
        ),
    )
