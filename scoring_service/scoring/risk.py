"""
Risk weight resolution.

The weight starts at 1.0 and is raised to the highest applicable multiplier:
  - exposure   (`facing`, e.g. External → 1.5)
  - sensitive data markers found in `dataTypes` (e.g. PII, PCI)

Factors never stack: External + PCI yields max(1.5, 1.5), not 2.25.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from scoring_service.scoring import fields
from scoring_service.scoring.tables import RiskFactorTable

BASE_RISK_WEIGHT = 1.0


@dataclass(frozen=True)
class RiskFactorMatch:
    source: str      # facing | dataTypes
    factor: str
    multiplier: float


@dataclass(frozen=True)
class RiskResult:
    weight: float
    matched: tuple[RiskFactorMatch, ...]


def resolve_risk_factors(app: Mapping[str, Any], risk_factors: RiskFactorTable) -> RiskResult:
    matched: list[RiskFactorMatch] = []
    weight = BASE_RISK_WEIGHT

    facing = fields.text(app, "facing")
    if facing:
        multiplier = risk_factors.facing.get(facing.casefold())
        if multiplier is not None:
            matched.append(RiskFactorMatch("facing", facing, multiplier))
            weight = max(weight, multiplier)

    data_types = fields.text(app, "dataTypes")
    if data_types:
        haystack = data_types.casefold()
        for marker, multiplier in risk_factors.data_types.items():
            if marker.casefold() in haystack:
                matched.append(RiskFactorMatch("dataTypes", marker, multiplier))
                weight = max(weight, multiplier)

    return RiskResult(weight=weight, matched=tuple(matched))


def resolve_risk_weight(app: Mapping[str, Any], risk_factors: RiskFactorTable) -> float:
    return resolve_risk_factors(app, risk_factors).weight
