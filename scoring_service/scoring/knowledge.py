"""
Knowledge Sharing score (0-50)

  Completeness  40 pts   5 pts for each of the 8 metadata fields that is filled
  Review        10 pts   metadata reviewed within the last 6 calendar months

The review window is calendar based: on 2026-08-31 the window starts on
2026-02-28. A review exactly on the window start still counts.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from scoring_service.scoring import fields

KNOWLEDGE_FIELDS = (
    "description",
    "owner",
    "repoUrl",
    "language",
    "framework",
    "serverEnvironment",
    "authProfiles",
    "dataTypes",
)

POINTS_PER_FIELD = 5.0
MAX_COMPLETENESS_SCORE = POINTS_PER_FIELD * len(KNOWLEDGE_FIELDS)  # 40
REVIEW_SCORE = 10.0
REVIEW_WINDOW_MONTHS = 6


@dataclass(frozen=True)
class KnowledgeResult:
    fields_filled: int
    total_fields: int
    completeness_score: float
    review_score: float
    last_reviewed: Optional[datetime]
    review_window_start: datetime

    @property
    def score(self) -> float:
        return self.completeness_score + self.review_score


def subtract_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month `months` earlier, clamped to the last day of that month."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def compute_knowledge_score(
    app: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> KnowledgeResult:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    filled = sum(1 for name in KNOWLEDGE_FIELDS if fields.is_filled(app, name))
    completeness = min(filled * POINTS_PER_FIELD, MAX_COMPLETENESS_SCORE)

    window_start = subtract_months(now, REVIEW_WINDOW_MONTHS)
    last_reviewed = fields.timestamp(app, "metadataLastReviewed")
    review = REVIEW_SCORE if last_reviewed is not None and last_reviewed >= window_start else 0.0

    return KnowledgeResult(
        fields_filled=filled,
        total_fields=len(KNOWLEDGE_FIELDS),
        completeness_score=completeness,
        review_score=review,
        last_reviewed=last_reviewed,
        review_window_start=window_start,
    )
