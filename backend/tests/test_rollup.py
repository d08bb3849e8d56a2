"""Tests for the portfolio roll-up over eligible buildings."""

from __future__ import annotations

import pytest

from firerate.models.building import (
    Building,
    BuildingProtectionData,
    BuildingProtectionRecord,
)
from firerate.models.results import PortfolioRollup
from firerate.scoring.rollup import RollupAggregator, is_rollup_eligible


@pytest.fixture()
def aggregator() -> RollupAggregator:
    return RollupAggregator()


def _record(
    building_id: str,
    final: int | None,
    required: float | None = 100.0,
) -> BuildingProtectionRecord:
    return BuildingProtectionRecord(
        site_id="S1",
        building_id=building_id,
        data=BuildingProtectionData(required_coverage_pct=required),
        final_active_score=final,
    )


class TestEligibility:
    def test_scored_and_required(self) -> None:
        assert is_rollup_eligible(_record("A", 4))

    def test_zero_requirement_excluded(self) -> None:
        assert not is_rollup_eligible(_record("A", 4, required=0.0))

    def test_unknown_requirement_excluded(self) -> None:
        assert not is_rollup_eligible(_record("A", 4, required=None))

    def test_unscored_excluded(self) -> None:
        assert not is_rollup_eligible(_record("A", None))


class TestRollup:
    def test_area_weighted_average(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", 4), _record("B", 2)]
        inventory = [Building(id="A", floor_area_m2=1000), Building(id="B", floor_area_m2=500)]
        result = aggregator.rollup(records, inventory)
        assert result.average_score == pytest.approx(10 / 3)
        assert result.average_score_display == 3.3
        assert result.buildings_assessed == 2
        assert result.total_weighted_area == 1500

    def test_not_required_does_not_dilute(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", 4), _record("B", 2), _record("C", 1, required=0.0)]
        inventory = [
            Building(id="A", floor_area_m2=1000),
            Building(id="B", floor_area_m2=500),
            Building(id="C", floor_area_m2=50_000),
        ]
        result = aggregator.rollup(records, inventory)
        assert result.average_score == pytest.approx(10 / 3)
        assert result.buildings_assessed == 2
        assert result.total_weighted_area == 1500

    def test_footprint_used_when_no_floor_area(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", 5), _record("B", 1)]
        inventory = [Building(id="A", footprint_m2=300), Building(id="B", floor_area_m2=100)]
        result = aggregator.rollup(records, inventory)
        assert result.average_score == pytest.approx(4.0)
        assert result.total_weighted_area == 400

    def test_no_usable_area_skipped(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", 5), _record("B", 1), _record("C", 1)]
        inventory = [
            Building(id="A", floor_area_m2=100),
            Building(id="B"),
            Building(id="C", floor_area_m2=0),
        ]
        result = aggregator.rollup(records, inventory)
        assert result.average_score == pytest.approx(5.0)
        assert result.buildings_assessed == 1

    def test_zero_floor_area_uses_footprint(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", 5), _record("B", 2)]
        inventory = [
            Building(id="A", floor_area_m2=100),
            Building(id="B", floor_area_m2=0, footprint_m2=300),
        ]
        result = aggregator.rollup(records, inventory)
        # (5 * 100 + 2 * 300) / 400
        assert result.average_score == pytest.approx(2.75)
        assert result.buildings_assessed == 2
        assert result.total_weighted_area == 400

    def test_record_without_inventory_entry_skipped(self, aggregator: RollupAggregator) -> None:
        result = aggregator.rollup([_record("A", 4), _record("GONE", 1)], [
            Building(id="A", floor_area_m2=100)
        ])
        assert result.buildings_assessed == 1
        assert result.average_score == pytest.approx(4.0)


class TestEmptyRollup:
    def test_no_records(self, aggregator: RollupAggregator) -> None:
        result = aggregator.rollup([], [])
        assert result == PortfolioRollup(
            average_score=0.0, buildings_assessed=0, total_weighted_area=0.0
        )

    def test_nothing_eligible(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", None), _record("B", 3, required=0.0)]
        inventory = [Building(id="A", floor_area_m2=100), Building(id="B", floor_area_m2=100)]
        result = aggregator.rollup(records, inventory)
        assert result.average_score == 0.0
        assert result.buildings_assessed == 0
        assert result.total_weighted_area == 0.0

    def test_result_is_never_nan(self, aggregator: RollupAggregator) -> None:
        result = aggregator.rollup([_record("A", 4)], [Building(id="A", floor_area_m2=0)])
        assert result.average_score == 0.0
        assert result.average_score == result.average_score


class TestDeterminism:
    def test_input_order_does_not_matter(self, aggregator: RollupAggregator) -> None:
        records = [_record("A", 4), _record("B", 2), _record("C", 5)]
        inventory = [
            Building(id="A", floor_area_m2=123.4),
            Building(id="B", floor_area_m2=56.7),
            Building(id="C", floor_area_m2=8.9),
        ]
        forward = aggregator.rollup(records, inventory)
        backward = aggregator.rollup(list(reversed(records)), list(reversed(inventory)))
        assert forward == backward
