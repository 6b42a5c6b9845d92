"""
Score payload returned to the portfolio UI.

Serialized with camelCase keys. The breakdown carries every number used in
the calculation so a reviewer can recompute the score by hand.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoreRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_IMPROVEMENT = "Needs Improvement"


class KnowledgeSharingBreakdown(_CamelModel):
    fields_filled: int
    total_fields: int
    completeness_score: float
    review_score: float
    last_reviewed: Optional[datetime] = None
    review_window_start: datetime


class ToolCategoryBreakdown(_CamelModel):
    category: str
    label: str
    tool: Optional[str] = None
    tool_class: Optional[str] = Field(None, description="managed | approvedUnmanaged | other")
    integration_level: Optional[int] = None
    not_applicable: bool = False
    configured: bool
    base_points: float
    risk_weight: float
    integration_weight: float
    tool_quality_weight: float
    possible_points: float
    achieved_points: float


class ToolUsageBreakdown(_CamelModel):
    total_achieved: float
    total_possible: float
    risk_weight: float
    categories: list[ToolCategoryBreakdown]


class RiskFactorBreakdown(_CamelModel):
    source: str = Field(description="facing | dataTypes")
    factor: str
    multiplier: float


class ScoreBreakdown(_CamelModel):
    knowledge_sharing: KnowledgeSharingBreakdown
    tool_usage: ToolUsageBreakdown
    risk_factors: list[RiskFactorBreakdown] = []


class ScoreResult(_CamelModel):
    knowledge_score: float = Field(ge=0, le=50)
    tool_score: float = Field(ge=0, le=50)
    total_score: float = Field(ge=0, le=100)
    rating: ScoreRating
    breakdown: ScoreBreakdown


class MarkReviewedResponse(BaseModel):
    """Mirrors the portfolio backend's mark-reviewed reply."""
    application: dict[str, Any]
    scores: ScoreResult
    message: str
