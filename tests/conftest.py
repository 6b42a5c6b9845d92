"""
Shared fixtures: synthetic scoring tables independent of the bundled JSON files.
"""
import pytest

from scoring_service.scoring.tables import ScoringTables

INTEGRATION_LEVELS = {
    "//": "test levels",
    "0": {"name": "None", "weight": 0.0},
    "1": {"name": "Manual", "weight": 0.25},
    "2": {"name": "Scheduled", "weight": 0.5},
    "3": {"name": "CI/CD", "weight": 0.75},
    "4": {"name": "Blocking", "weight": 1.0},
}

TOOL_QUALITY = {
    "weights": {"managed": 1.2, "approvedUnmanaged": 1.0, "other": 0.8},
    "tools": {"managed": ["Snyk", "Checkmarx"], "approvedUnmanaged": ["Semgrep", "OWASP ZAP"]},
}

RISK_FACTORS = {
    "facing": {"External": 1.5, "Internal": 1.0},
    "dataTypes": {"PII": 1.3, "PCI": 1.5},
}


@pytest.fixture
def tables() -> ScoringTables:
    return ScoringTables.from_dicts(INTEGRATION_LEVELS, TOOL_QUALITY, RISK_FACTORS)
