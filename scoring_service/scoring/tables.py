"""
Scoring configuration tables

Three lookup tables drive the tool usage score:
  1. Integration levels  → weight per level (0.0 – 1.0)
  2. Tool quality        → weight per tool class (managed / approvedUnmanaged / other)
  3. Risk factors        → multipliers for exposure and sensitive data types

Tables are validated once when they are built and are immutable afterwards.
Construction raises ConfigurationError for a missing or inconsistent table.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

MANAGED = "managed"
APPROVED_UNMANAGED = "approvedUnmanaged"
OTHER = "other"
TOOL_CLASSES = (MANAGED, APPROVED_UNMANAGED, OTHER)

COMMENT_KEY = "//"


class ConfigurationError(Exception):
    """A scoring table is missing or malformed."""


def _as_float(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{where}: expected a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{where}: expected a finite number, got {value!r}")
    return float(value)


def _as_mapping(value: Any, where: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{where}: expected an object, got {type(value).__name__}")
    return value


# ═══════════════════════════════════════════════════════════════
# Integration levels
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class IntegrationLevel:
    level: int
    name: str
    weight: float


@dataclass(frozen=True)
class IntegrationLevelTable:
    levels: Mapping[int, IntegrationLevel]

    def __post_init__(self):
        if not self.levels:
            raise ConfigurationError("integration levels: table has no entries")

        previous = None
        for level in sorted(self.levels):
            entry = self.levels[level]
            if level < 0:
                raise ConfigurationError(f"integration levels: negative level {level}")
            if not math.isfinite(entry.weight) or not 0.0 <= entry.weight <= 1.0:
                raise ConfigurationError(
                    f"integration levels: weight {entry.weight} for level {level} is outside [0, 1]"
                )
            if previous is not None and entry.weight < previous.weight:
                raise ConfigurationError(
                    f"integration levels: weight decreases from level {previous.level} to {level}"
                )
            previous = entry

        if previous.weight != 1.0:
            raise ConfigurationError(
                f"integration levels: highest level {previous.level} must have weight 1.0"
            )

        object.__setattr__(self, "levels", MappingProxyType(dict(self.levels)))

    @classmethod
    def from_dict(cls, data: Any) -> IntegrationLevelTable:
        """Build from the JSON layout: {"0": {"name": ..., "weight": ...}, ...}."""
        data = _as_mapping(data, "integration levels")
        levels: dict[int, IntegrationLevel] = {}
        for key, value in data.items():
            if key == COMMENT_KEY:
                continue
            try:
                level = int(key)
            except (TypeError, ValueError):
                raise ConfigurationError(f"integration levels: level key {key!r} is not an integer")
            value = _as_mapping(value, f"integration levels[{key}]")
            if "weight" not in value:
                raise ConfigurationError(f"integration levels[{key}]: missing weight")
            levels[level] = IntegrationLevel(
                level=level,
                name=str(value.get("name", key)),
                weight=_as_float(value["weight"], f"integration levels[{key}].weight"),
            )
        return cls(levels)

    @property
    def lowest(self) -> IntegrationLevel:
        return self.levels[min(self.levels)]

    def get(self, level: int) -> IntegrationLevel | None:
        return self.levels.get(level)

    def options(self) -> list[dict[str, str]]:
        """Select options for forms, ordered by level."""
        return [
            {"value": str(level), "label": self.levels[level].name}
            for level in sorted(self.levels)
        ]


# ═══════════════════════════════════════════════════════════════
# Tool quality
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ToolQualityTable:
    weights: Mapping[str, float]
    classification: Mapping[str, str]  # normalized tool name → tool class

    def __post_init__(self):
        missing = [c for c in TOOL_CLASSES if c not in self.weights]
        if missing:
            raise ConfigurationError(f"tool quality: missing weights for {', '.join(missing)}")
        for tool_class in TOOL_CLASSES:
            if not math.isfinite(self.weights[tool_class]):
                raise ConfigurationError(f"tool quality: non-finite weight for {tool_class}")
            if self.weights[tool_class] < 0:
                raise ConfigurationError(f"tool quality: negative weight for {tool_class}")
        if not (
            self.weights[MANAGED] >= self.weights[APPROVED_UNMANAGED] >= self.weights[OTHER]
        ):
            raise ConfigurationError(
                "tool quality: weights must satisfy managed >= approvedUnmanaged >= other"
            )

        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))
        object.__setattr__(self, "classification", MappingProxyType(dict(self.classification)))

    @classmethod
    def from_dict(cls, data: Any) -> ToolQualityTable:
        """
        Build from the JSON layout:
            {"weights": {"managed": 1.2, "approvedUnmanaged": 1.0, "other": 0.8},
             "tools":   {"managed": ["Snyk", ...], "approvedUnmanaged": [...]}}
        """
        data = _as_mapping(data, "tool quality")
        raw_weights = _as_mapping(data.get("weights"), "tool quality.weights")
        weights = {
            tool_class: _as_float(raw_weights[tool_class], f"tool quality.weights.{tool_class}")
            for tool_class in TOOL_CLASSES
            if tool_class in raw_weights
        }

        classification: dict[str, str] = {}
        tools = _as_mapping(data.get("tools", {}), "tool quality.tools")
        for tool_class, names in tools.items():
            if tool_class not in (MANAGED, APPROVED_UNMANAGED):
                raise ConfigurationError(f"tool quality.tools: unknown tool class {tool_class!r}")
            if not isinstance(names, (list, tuple)):
                raise ConfigurationError(f"tool quality.tools.{tool_class}: expected a list")
            for name in names:
                key = normalize_tool_name(name)
                if not key:
                    continue
                if classification.get(key, tool_class) != tool_class:
                    raise ConfigurationError(
                        f"tool quality: {name!r} is listed as both managed and approvedUnmanaged"
                    )
                classification[key] = tool_class

        return cls(weights=weights, classification=classification)

    def classify(self, tool_name: Any) -> str:
        return self.classification.get(normalize_tool_name(tool_name), OTHER)

    def weight_for(self, tool_class: str) -> float:
        return self.weights[tool_class]


def normalize_tool_name(name: Any) -> str:
    if not isinstance(name, str):
        return ""
    return name.strip().casefold()


# ═══════════════════════════════════════════════════════════════
# Risk factors
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RiskFactorTable:
    facing: Mapping[str, float]       # exposure value (casefolded) → multiplier
    data_types: Mapping[str, float]   # sensitivity marker → multiplier

    def __post_init__(self):
        for section, table in (("facing", self.facing), ("dataTypes", self.data_types)):
            for key, multiplier in table.items():
                if not key.strip():
                    raise ConfigurationError(f"risk factors.{section}: empty factor name")
                if not math.isfinite(multiplier):
                    raise ConfigurationError(
                        f"risk factors.{section}.{key}: multiplier {multiplier} is not finite"
                    )
                if multiplier < 1.0:
                    raise ConfigurationError(
                        f"risk factors.{section}.{key}: multiplier {multiplier} is below 1.0"
                    )

        facing: dict[str, float] = {}
        for key, multiplier in self.facing.items():
            normalized = key.strip().casefold()
            if normalized in facing:
                raise ConfigurationError(f"risk factors.facing: {key!r} is listed more than once")
            facing[normalized] = multiplier

        object.__setattr__(self, "facing", MappingProxyType(facing))
        object.__setattr__(self, "data_types", MappingProxyType(dict(self.data_types)))

    @classmethod
    def from_dict(cls, data: Any) -> RiskFactorTable:
        data = _as_mapping(data, "risk factors")
        facing = _as_mapping(data.get("facing", {}), "risk factors.facing")
        data_types = _as_mapping(data.get("dataTypes", {}), "risk factors.dataTypes")
        return cls(
            facing={
                str(k): _as_float(v, f"risk factors.facing.{k}")
                for k, v in facing.items() if k != COMMENT_KEY
            },
            data_types={
                str(k): _as_float(v, f"risk factors.dataTypes.{k}")
                for k, v in data_types.items() if k != COMMENT_KEY
            },
        )


# ═══════════════════════════════════════════════════════════════
# Bundle passed into every scoring call
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ScoringTables:
    integration_levels: IntegrationLevelTable
    tool_quality: ToolQualityTable
    risk_factors: RiskFactorTable

    @classmethod
    def from_dicts(
        cls,
        integration_levels: Any,
        tool_quality: Any,
        risk_factors: Any,
    ) -> ScoringTables:
        return cls(
            integration_levels=IntegrationLevelTable.from_dict(integration_levels),
            tool_quality=ToolQualityTable.from_dict(tool_quality),
            risk_factors=RiskFactorTable.from_dict(risk_factors),
        )
