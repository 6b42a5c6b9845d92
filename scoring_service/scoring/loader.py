"""
Scoring table loader.

Reads integrationLevels.json, toolQuality.json and riskFactors.json from a
directory and keeps the current ScoringTables for the process. Reloads build a
complete new bundle and swap the reference, so a caller never sees a
half-updated set of tables.
"""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Optional

import structlog

from scoring_service.scoring.tables import ConfigurationError, ScoringTables

logger = structlog.get_logger()

DEFAULT_TABLES_DIR = Path(__file__).resolve().parent.parent / "data" / "scoring"

INTEGRATION_LEVELS_FILE = "integrationLevels.json"
TOOL_QUALITY_FILE = "toolQuality.json"
RISK_FACTORS_FILE = "riskFactors.json"


def _read_json(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"{path.name}: file not found in {path.parent}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path.name}: invalid JSON ({e})")


def load_scoring_tables(directory: Path | str | None = None) -> ScoringTables:
    """Load and validate all three tables. Raises ConfigurationError."""
    base = Path(directory) if directory else DEFAULT_TABLES_DIR
    tables = ScoringTables.from_dicts(
        integration_levels=_read_json(base / INTEGRATION_LEVELS_FILE),
        tool_quality=_read_json(base / TOOL_QUALITY_FILE),
        risk_factors=_read_json(base / RISK_FACTORS_FILE),
    )
    logger.info(
        "scoring_tables_loaded",
        directory=str(base),
        integration_levels=len(tables.integration_levels.levels),
        classified_tools=len(tables.tool_quality.classification),
    )
    return tables


class ScoringTableStore:
    """Holds the tables currently in use by the service."""

    def __init__(self, directory: Path | str | None = None):
        self.directory = directory
        self._tables: Optional[ScoringTables] = None
        self._last_error: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def is_loaded(self) -> bool:
        return self._tables is not None

    def load(self) -> ScoringTables:
        """
        Load tables from disk and swap them in.
        On failure the previously loaded tables stay active and the error is re-raised.
        """
        try:
            tables = load_scoring_tables(self.directory)
        except ConfigurationError as e:
            self._last_error = str(e)
            logger.error("scoring_tables_invalid", directory=str(self.directory), error=str(e))
            raise

        with self._lock:
            self._tables = tables
            self._last_error = None
        return tables

    reload = load

    def set(self, tables: ScoringTables) -> None:
        with self._lock:
            self._tables = tables
            self._last_error = None

    def get(self) -> ScoringTables:
        tables = self._tables
        if tables is None:
            raise ConfigurationError(self._last_error or "scoring tables have not been loaded")
        return tables
