"""
Unit tests for scoring table validation, loading and hot reload.
"""
import copy
import json
import math

import pytest

from conftest import INTEGRATION_LEVELS, RISK_FACTORS, TOOL_QUALITY
from scoring_service.scoring.loader import ScoringTableStore, load_scoring_tables
from scoring_service.scoring.tables import (
    ConfigurationError,
    IntegrationLevelTable,
    RiskFactorTable,
    ToolQualityTable,
)


def _write_tables(directory, integration_levels=INTEGRATION_LEVELS, tool_quality=TOOL_QUALITY, risk_factors=RISK_FACTORS):
    (directory / "integrationLevels.json").write_text(json.dumps(integration_levels))
    (directory / "toolQuality.json").write_text(json.dumps(tool_quality))
    (directory / "riskFactors.json").write_text(json.dumps(risk_factors))


class TestIntegrationLevelTable:
    def test_comment_key_skipped(self):
        table = IntegrationLevelTable.from_dict(INTEGRATION_LEVELS)
        assert sorted(table.levels) == [0, 1, 2, 3, 4]
        assert table.lowest.level == 0

    def test_empty_table(self):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"//": "nothing here"})

    def test_weights_must_not_decrease(self):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"0": {"weight": 0.5}, "1": {"weight": 0.2}, "2": {"weight": 1.0}})

    def test_highest_level_must_be_one(self):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"0": {"weight": 0.0}, "1": {"weight": 0.8}})

    def test_weight_out_of_range(self):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"0": {"weight": -0.1}, "1": {"weight": 1.0}})

    def test_non_integer_level(self):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"high": {"weight": 1.0}})

    @pytest.mark.parametrize("weight", [math.inf, math.nan])
    def test_non_finite_weight(self, weight):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"0": {"weight": 0.0}, "1": {"weight": weight}})

    def test_missing_weight(self):
        with pytest.raises(ConfigurationError):
            IntegrationLevelTable.from_dict({"0": {"name": "None"}})

    def test_options(self):
        options = IntegrationLevelTable.from_dict(INTEGRATION_LEVELS).options()
        assert options[0] == {"value": "0", "label": "None"}
        assert [o["value"] for o in options] == ["0", "1", "2", "3", "4"]

    def test_immutable(self):
        table = IntegrationLevelTable.from_dict(INTEGRATION_LEVELS)
        with pytest.raises(TypeError):
            table.levels[5] = table.lowest


class TestToolQualityTable:
    def test_classify(self):
        table = ToolQualityTable.from_dict(TOOL_QUALITY)
        assert table.classify("snyk") == "managed"
        assert table.classify(" Semgrep ") == "approvedUnmanaged"
        assert table.classify("Unknown Scanner") == "other"
        assert table.classify(None) == "other"

    def test_weights_must_be_ordered(self):
        bad = copy.deepcopy(TOOL_QUALITY)
        bad["weights"]["other"] = 1.5
        with pytest.raises(ConfigurationError):
            ToolQualityTable.from_dict(bad)

    def test_missing_class_weight(self):
        bad = copy.deepcopy(TOOL_QUALITY)
        del bad["weights"]["approvedUnmanaged"]
        with pytest.raises(ConfigurationError):
            ToolQualityTable.from_dict(bad)

    def test_tool_in_two_classes(self):
        bad = copy.deepcopy(TOOL_QUALITY)
        bad["tools"]["approvedUnmanaged"].append("SNYK")
        with pytest.raises(ConfigurationError):
            ToolQualityTable.from_dict(bad)

    @pytest.mark.parametrize("weight", [math.inf, math.nan])
    def test_non_finite_weight(self, weight):
        bad = copy.deepcopy(TOOL_QUALITY)
        bad["weights"]["managed"] = weight
        with pytest.raises(ConfigurationError):
            ToolQualityTable.from_dict(bad)

    def test_non_finite_weight_direct(self):
        with pytest.raises(ConfigurationError):
            ToolQualityTable(weights={"managed": math.inf, "approvedUnmanaged": 1.0, "other": 0.8}, classification={})

    def test_unknown_tool_class(self):
        bad = copy.deepcopy(TOOL_QUALITY)
        bad["tools"]["premium"] = ["Foo"]
        with pytest.raises(ConfigurationError):
            ToolQualityTable.from_dict(bad)


class TestRiskFactorTable:
    def test_multiplier_below_one(self):
        with pytest.raises(ConfigurationError):
            RiskFactorTable.from_dict({"facing": {"External": 0.9}})

    @pytest.mark.parametrize("multiplier", [math.inf, math.nan])
    def test_non_finite_multiplier(self, multiplier):
        with pytest.raises(ConfigurationError):
            RiskFactorTable.from_dict({"facing": {"External": multiplier}})
        with pytest.raises(ConfigurationError):
            RiskFactorTable.from_dict({"dataTypes": {"PII": multiplier}})

    def test_non_finite_multiplier_direct(self):
        with pytest.raises(ConfigurationError):
            RiskFactorTable(facing={"External": math.inf}, data_types={})
        with pytest.raises(ConfigurationError):
            RiskFactorTable(facing={}, data_types={"PCI": math.nan})

    def test_facing_keys_differing_by_case(self):
        with pytest.raises(ConfigurationError, match="more than once"):
            RiskFactorTable.from_dict({"facing": {"External": 1.5, "external": 2.0}})

    def test_non_numeric_multiplier(self):
        with pytest.raises(ConfigurationError):
            RiskFactorTable.from_dict({"dataTypes": {"PII": "high"}})

    def test_not_an_object(self):
        with pytest.raises(ConfigurationError):
            RiskFactorTable.from_dict(["External"])


class TestLoader:
    def test_bundled_tables_load(self):
        tables = load_scoring_tables()
        assert tables.integration_levels.get(3).weight == 0.75
        assert tables.tool_quality.classify("Snyk") == "managed"
        assert tables.tool_quality.weight_for("managed") == 1.2
        assert tables.risk_factors.facing["external"] == 1.5

    def test_missing_file(self, tmp_path):
        (tmp_path / "integrationLevels.json").write_text(json.dumps(INTEGRATION_LEVELS))
        with pytest.raises(ConfigurationError, match="toolQuality.json"):
            load_scoring_tables(tmp_path)

    def test_infinity_literal_in_json(self, tmp_path):
        _write_tables(tmp_path)
        (tmp_path / "riskFactors.json").write_text('{"facing": {"External": Infinity}}')
        with pytest.raises(ConfigurationError, match="not finite|finite number"):
            load_scoring_tables(tmp_path)

    def test_nan_literal_in_json(self, tmp_path):
        _write_tables(tmp_path)
        (tmp_path / "integrationLevels.json").write_text('{"0": {"weight": NaN}, "1": {"weight": 1.0}}')
        with pytest.raises(ConfigurationError):
            load_scoring_tables(tmp_path)

    def test_invalid_json(self, tmp_path):
        _write_tables(tmp_path)
        (tmp_path / "riskFactors.json").write_text("{not json")
        with pytest.raises(ConfigurationError, match="riskFactors.json"):
            load_scoring_tables(tmp_path)


class TestStore:
    def test_get_before_load(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ScoringTableStore(tmp_path).get()

    def test_failed_reload_keeps_previous_tables(self, tmp_path):
        _write_tables(tmp_path)
        store = ScoringTableStore(tmp_path)
        first = store.load()

        _write_tables(tmp_path, integration_levels={})
        with pytest.raises(ConfigurationError):
            store.reload()

        assert store.get() is first
        assert store.last_error is not None

    def test_reload_swaps_whole_bundle(self, tmp_path):
        _write_tables(tmp_path)
        store = ScoringTableStore(tmp_path)
        first = store.load()

        changed = copy.deepcopy(RISK_FACTORS)
        changed["facing"]["External"] = 2.0
        _write_tables(tmp_path, risk_factors=changed)
        second = store.reload()

        assert second is not first
        assert store.get().risk_factors.facing["external"] == 2.0
        assert first.risk_factors.facing["external"] == 1.5
        assert store.last_error is None
