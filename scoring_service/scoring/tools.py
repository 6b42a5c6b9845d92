"""
Tool Usage score (0-50)

Four categories, 12.5 base points each:

  SAST | DAST | Application Firewall | API Security

  achieved = 12.5 × integration weight × tool quality weight × risk weight
  possible = 12.5 × risk weight

  toolScore = min(50, Σ achieved / Σ possible × 50)

Risk weight scales achieved and possible points alike, so it cancels out of
the normalized score. It is kept in the per-category numbers so the breakdown
shows the risk-adjusted points.

API Security marked N/A gets the full possible points for that category.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import structlog

from scoring_service.scoring import fields
from scoring_service.scoring.tables import IntegrationLevelTable, ToolQualityTable

logger = structlog.get_logger()

MAX_TOOL_SCORE = 50.0


@dataclass(frozen=True)
class ToolCategory:
    key: str
    label: str
    supports_na: bool = False

    @property
    def tool_field(self) -> str:
        return f"{self.key}Tool"

    @property
    def level_field(self) -> str:
        return f"{self.key}IntegrationLevel"

    @property
    def na_field(self) -> str:
        return f"{self.key}NA"


TOOL_CATEGORIES = (
    ToolCategory("sast", "SAST"),
    ToolCategory("dast", "DAST"),
    ToolCategory("appFirewall", "Application Firewall"),
    ToolCategory("apiSecurity", "API Security", supports_na=True),
)

BASE_POINTS_PER_CATEGORY = MAX_TOOL_SCORE / len(TOOL_CATEGORIES)  # 12.5


@dataclass(frozen=True)
class CategoryResult:
    key: str
    label: str
    tool: Optional[str]
    tool_class: Optional[str]
    integration_level: Optional[int]
    not_applicable: bool
    configured: bool
    base_points: float
    risk_weight: float
    integration_weight: float
    tool_quality_weight: float
    possible_points: float
    achieved_points: float


@dataclass(frozen=True)
class ToolUsageResult:
    score: float
    total_achieved: float
    total_possible: float
    risk_weight: float
    categories: tuple[CategoryResult, ...]


def _score_category(
    app: Mapping[str, Any],
    category: ToolCategory,
    integration_levels: IntegrationLevelTable,
    tool_quality: ToolQualityTable,
    risk_weight: float,
) -> CategoryResult:
    base = BASE_POINTS_PER_CATEGORY
    possible = base * risk_weight
    tool = fields.text(app, category.tool_field)
    level_set, level = fields.integer(app, category.level_field)

    # ── N/A: assessed and not relevant → full credit ──
    if category.supports_na and fields.flag(app, category.na_field):
        return CategoryResult(
            key=category.key, label=category.label, tool=tool, tool_class=None,
            integration_level=level, not_applicable=True, configured=False,
            base_points=base, risk_weight=risk_weight,
            integration_weight=1.0, tool_quality_weight=1.0,
            possible_points=possible, achieved_points=possible,
        )

    # ── Not configured → 0 ──
    if tool is None or not level_set:
        return CategoryResult(
            key=category.key, label=category.label, tool=tool, tool_class=None,
            integration_level=level, not_applicable=False, configured=False,
            base_points=base, risk_weight=risk_weight,
            integration_weight=0.0, tool_quality_weight=0.0,
            possible_points=possible, achieved_points=0.0,
        )

    entry = integration_levels.get(level) if level is not None else None
    if entry is None:
        entry = integration_levels.lowest
        logger.warning(
            "invalid_integration_level",
            category=category.key,
            value=app.get(category.level_field),
            fallback_level=entry.level,
        )

    tool_class = tool_quality.classify(tool)
    quality_weight = tool_quality.weight_for(tool_class)
    achieved = base * entry.weight * quality_weight * risk_weight

    return CategoryResult(
        key=category.key, label=category.label, tool=tool, tool_class=tool_class,
        integration_level=entry.level, not_applicable=False, configured=True,
        base_points=base, risk_weight=risk_weight,
        integration_weight=entry.weight, tool_quality_weight=quality_weight,
        possible_points=possible, achieved_points=achieved,
    )


def compute_tool_score(
    app: Mapping[str, Any],
    integration_levels: IntegrationLevelTable,
    tool_quality: ToolQualityTable,
    risk_weight: float,
) -> ToolUsageResult:
    categories = tuple(
        _score_category(app, category, integration_levels, tool_quality, risk_weight)
        for category in TOOL_CATEGORIES
    )

    total_achieved = sum(c.achieved_points for c in categories)
    total_possible = sum(c.possible_points for c in categories)

    if total_possible <= 0:
        score = 0.0
    else:
        score = total_achieved / total_possible * MAX_TOOL_SCORE
        score = max(0.0, min(MAX_TOOL_SCORE, score))

    return ToolUsageResult(
        score=score,
        total_achieved=total_achieved,
        total_possible=total_possible,
        risk_weight=risk_weight,
        categories=categories,
    )
