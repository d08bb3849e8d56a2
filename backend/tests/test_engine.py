"""Tests for the AssessmentEngine, the end-to-end assessment pipeline."""

from __future__ import annotations

import pytest

from firerate.engine import ENGINE_VERSION, AssessmentEngine
from firerate.factory import create_default_engine
from firerate.models.building import (
    Building,
    BuildingProtectionData,
    BuildingProtectionRecord,
    DetectionData,
)
from firerate.models.enums import WaterReliability
from firerate.models.site import SiteWaterContext


@pytest.fixture()
def engine() -> AssessmentEngine:
    return create_default_engine()


# ---------------------------------------------------------------------------
# Helper builders
# ---------------------------------------------------------------------------


def _site(reliability: str = "unknown", **overrides: object) -> SiteWaterContext:
    return SiteWaterContext(site_id="S1", reliability=reliability, **overrides)


def _inventory() -> list[Building]:
    return [
        Building(id="WH", ref="B1", description="Warehouse", floor_area_m2=1000),
        Building(id="OF", ref="B2", description="Offices", floor_area_m2=500),
    ]


def _sprinklered(building_id: str, rating: int, **overrides: object) -> BuildingProtectionRecord:
    data: dict[str, object] = {
        "installed_systems": ["sprinklers"],
        "required_coverage_pct": 100,
        "installed_coverage_pct": 100,
        "standard_reference": "BS EN 12845",
        "rating": rating,
    }
    data.update(overrides)
    return BuildingProtectionRecord(
        site_id="S1", building_id=building_id, data=BuildingProtectionData(**data)
    )


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestHappyPath:
    def test_scores_and_rollup(self, engine: AssessmentEngine) -> None:
        site = _site(
            "reliable",
            testing_regime="documented",
            power_resilience="good",
            pump_arrangement="duty+standby",
        )
        records = [_sprinklered("WH", 4), _sprinklered("OF", 2)]
        result = engine.assess(site, records, _inventory())

        assert result.site.water_score == 5
        wh = result.building("WH")
        of = result.building("OF")
        assert wh is not None and of is not None
        assert wh.record.component_score == 4
        assert wh.record.final_active_score == 4
        assert of.record.final_active_score == 2

        # (4 * 1000 + 2 * 500) / 1500
        assert result.rollup.average_score == pytest.approx(10 / 3)
        assert result.rollup.buildings_assessed == 2
        assert result.site_portfolio_score == 3

    def test_metadata(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site(), [], _inventory())
        assert result.engine_version == ENGINE_VERSION == "0.1.0"
        assert result.config_version == "2026.1"

    def test_weak_water_caps_building(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site("unreliable"), [_sprinklered("WH", 5)], _inventory())
        wh = result.building("WH")
        assert wh is not None
        assert wh.record.component_score == 5
        assert wh.record.final_active_score == 1
        codes = [f.code for f in wh.flags]
        assert "WATER_DEPENDENCY" in codes
        assert "RATING_WATER_MISMATCH" in codes

    def test_recommendations_included(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site("unreliable"), [_sprinklered("WH", 1)], _inventory())
        ids = [d.id for d in result.recommendations]
        assert ids == ["building:WH:SUPPRESSION_INADEQUATE", "site:WATER_UNRELIABLE"]

    def test_detection_contributes(self, engine: AssessmentEngine) -> None:
        record = _sprinklered("WH", 5, detection=DetectionData(rating=1))
        result = engine.assess(_site("reliable"), [record], _inventory())
        wh = result.building("WH")
        assert wh is not None
        assert wh.record.component_score == 4


# ---------------------------------------------------------------------------
# Record synchronisation
# ---------------------------------------------------------------------------


class TestRecordSync:
    def test_missing_records_created(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site(), [], _inventory())
        assert [b.record.building_id for b in result.buildings] == ["WH", "OF"]
        for assessment in result.buildings:
            assert assessment.record.site_id == "S1"
            assert not assessment.has_component_evidence
            assert assessment.record.component_score is None
            assert assessment.record.final_active_score == 3
            assert assessment.flags == []

    def test_default_records_excluded_from_rollup(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site(), [], _inventory())
        assert result.rollup.buildings_assessed == 0
        assert result.rollup.average_score == 0.0

    def test_inventory_order_kept(self, engine: AssessmentEngine) -> None:
        inventory = list(reversed(_inventory()))
        result = engine.assess(_site(), [_sprinklered("WH", 4)], inventory)
        assert [b.record.building_id for b in result.buildings] == ["OF", "WH"]

    def test_orphan_records_dropped(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site(), [_sprinklered("DEMOLISHED", 1)], _inventory())
        assert result.building("DEMOLISHED") is None
        assert len(result.buildings) == 2

    def test_duplicate_records_keep_first(self, engine: AssessmentEngine) -> None:
        result = engine.assess(
            _site("reliable"), [_sprinklered("WH", 2), _sprinklered("WH", 5)], _inventory()
        )
        wh = result.building("WH")
        assert wh is not None
        assert wh.record.component_score == 2

    def test_duplicate_inventory_entries_assessed_once(self, engine: AssessmentEngine) -> None:
        inventory = _inventory() + [Building(id="WH", floor_area_m2=1000)]
        result = engine.assess(_site(), [], inventory)
        assert len(result.buildings) == 2


# ---------------------------------------------------------------------------
# Purity
# ---------------------------------------------------------------------------


class TestPurity:
    def test_inputs_not_mutated(self, engine: AssessmentEngine) -> None:
        site = _site("unreliable")
        records = [_sprinklered("WH", 5)]
        site_before = site.model_copy(deep=True)
        records_before = [r.model_copy(deep=True) for r in records]

        engine.assess(site, records, _inventory())

        assert site == site_before
        assert site.water_score == 3
        assert records == records_before
        assert records[0].final_active_score is None

    def test_idempotent(self, engine: AssessmentEngine) -> None:
        site = _site("unreliable", testing_regime="none")
        records = [_sprinklered("WH", 5), _sprinklered("OF", 2, installed_coverage_pct=40)]
        first = engine.assess(site, records, _inventory())
        second = engine.assess(site, records, _inventory())
        assert first.model_dump() == second.model_dump()

    def test_reassessing_output_is_stable(self, engine: AssessmentEngine) -> None:
        records = [_sprinklered("WH", 5), _sprinklered("OF", 2)]
        first = engine.assess(_site("reliable"), records, _inventory())
        second = engine.assess(
            first.site, [b.record for b in first.buildings], _inventory()
        )
        assert second.model_dump() == first.model_dump()

    def test_water_change_rescores_every_building(self, engine: AssessmentEngine) -> None:
        records = [_sprinklered("WH", 5), _sprinklered("OF", 4)]
        good = engine.assess(_site("reliable"), records, _inventory())
        bad = engine.assess(_site("unreliable"), records, _inventory())
        assert [b.record.final_active_score for b in good.buildings] == [4, 4]
        assert [b.record.final_active_score for b in bad.buildings] == [1, 1]


# ---------------------------------------------------------------------------
# Data-quality notes
# ---------------------------------------------------------------------------


class TestDataQualityNotes:
    def test_neutral_defaults_recorded(self, engine: AssessmentEngine) -> None:
        result = engine.assess(_site(), [], _inventory())
        params = [(n.building_id, n.parameter) for n in result.data_quality_notes]
        assert ("WH", "record") in params
        assert ("OF", "record") in params
        assert ("WH", "component_score") in params
        assert (None, "water_reliability") in params

    def test_no_notes_for_complete_evidence(self, engine: AssessmentEngine) -> None:
        result = engine.assess(
            _site("reliable"), [_sprinklered("WH", 4), _sprinklered("OF", 4)], _inventory()
        )
        assert result.data_quality_notes == []


# ---------------------------------------------------------------------------
# Single-building scoring and summary
# ---------------------------------------------------------------------------


class TestAssessBuilding:
    def test_assess_building(self, engine: AssessmentEngine) -> None:
        assessment = engine.assess_building(
            _sprinklered("WH", 5), 2, WaterReliability.UNKNOWN
        )
        assert assessment.record.component_score == 5
        assert assessment.record.final_active_score == 2
        assert [f.code for f in assessment.flags] == ["RATING_WATER_MISMATCH"]


class TestSummaryDict:
    def test_summary(self, engine: AssessmentEngine) -> None:
        result = engine.assess(
            _site("unreliable"), [_sprinklered("WH", 5), _sprinklered("OF", 4)], _inventory()
        )
        summary = result.to_summary_dict()
        assert summary["site_id"] == "S1"
        assert summary["water_score_formatted"] == "1 / 5"
        assert summary["water_score_label"] == "Inadequate"
        assert summary["site_portfolio_score_formatted"] == "1 / 5"
        assert summary["average_score_formatted"] == "1 / 5"
        assert summary["buildings_assessed"] == 2
        assert summary["total_weighted_area_formatted"] == "1,500 m²"
        assert summary["num_buildings"] == 2
        # WATER_DEPENDENCY + RATING_WATER_MISMATCH on each building
        assert summary["num_warnings"] == 4
        assert summary["recommendations"] == {"total": 1, "high": 1, "medium": 0, "low": 0}
