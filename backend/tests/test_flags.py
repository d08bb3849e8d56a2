"""Tests for the advisory FlagEngine."""

from __future__ import annotations

import dataclasses

import pytest

from firerate.config import ScoringConfig
from firerate.flags import (
    DEFAULT_FLAG_RULES,
    FlagContext,
    FlagEngine,
    resolve_water_reliability,
)
from firerate.models.building import BuildingProtectionData
from firerate.models.enums import Severity, SystemType, WaterReliability
from firerate.models.results import AdvisoryFlag
from firerate.normalizer import RatingNormalizer
from firerate.scoring.building import BuildingScoreCalculator


@pytest.fixture()
def flag_engine() -> FlagEngine:
    return FlagEngine(ScoringConfig())


def _protected(
    systems: list[str] | None = None,
    required: float | None = 100.0,
    installed: float | None = 100.0,
    standard: str = "BS EN 12845",
    rating: int | None = 4,
) -> BuildingProtectionData:
    return BuildingProtectionData(
        installed_systems=["sprinklers"] if systems is None else systems,
        required_coverage_pct=required,
        installed_coverage_pct=installed,
        standard_reference=standard,
        rating=rating,
    )


def _codes(flags: list[AdvisoryFlag]) -> list[str]:
    return [f.code for f in flags]


# ---------------------------------------------------------------------------
# Water dependency
# ---------------------------------------------------------------------------


class TestWaterDependency:
    @pytest.mark.parametrize("system", ["sprinklers", "water_mist", "foam"])
    def test_fires_for_water_based_systems(self, flag_engine: FlagEngine, system: str) -> None:
        flags = flag_engine.evaluate(_protected([system]), 4, 1, "unreliable")
        assert "WATER_DEPENDENCY" in _codes(flags)

    def test_not_for_gaseous_only(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(["gaseous"]), 4, 1, "unreliable")
        assert "WATER_DEPENDENCY" not in _codes(flags)

    def test_not_when_reliable(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(), 4, 5, "reliable")
        assert "WATER_DEPENDENCY" not in _codes(flags)

    def test_not_when_unknown(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(), 4, 3, "unknown")
        assert "WATER_DEPENDENCY" not in _codes(flags)

    def test_message_names_only_water_based_systems(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(["gaseous", "water_mist"]), 4, 1, "unreliable")
        (flag,) = [f for f in flags if f.code == "WATER_DEPENDENCY"]
        assert flag.severity == Severity.WARNING
        assert "water mist" in flag.message
        assert "gaseous" not in flag.message

    def test_reliability_inferred_from_floor_score(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(), 4, 1)
        assert "WATER_DEPENDENCY" in _codes(flags)

    def test_custom_water_dependent_set(self) -> None:
        config = ScoringConfig(water_dependent_systems=frozenset({SystemType.GASEOUS}))
        flags = FlagEngine(config).evaluate(_protected(["gaseous"]), 4, 1, "unreliable")
        assert "WATER_DEPENDENCY" in _codes(flags)


class TestResolveWaterReliability:
    def test_explicit_value_wins(self) -> None:
        assert resolve_water_reliability("reliable", 1) == WaterReliability.RELIABLE

    def test_inferred(self) -> None:
        assert resolve_water_reliability(None, 1) == WaterReliability.UNRELIABLE
        assert resolve_water_reliability(None, 2) == WaterReliability.UNKNOWN

    def test_garbage_is_unknown(self) -> None:
        assert resolve_water_reliability("maybe", 1) == WaterReliability.UNKNOWN


# ---------------------------------------------------------------------------
# Other rules
# ---------------------------------------------------------------------------


class TestCoverageFlags:
    def test_coverage_gap(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(installed=60.0), 4, 5, "reliable")
        (flag,) = flags
        assert flag.code == "COVERAGE_GAP"
        assert flag.severity == Severity.WARNING
        assert flag.message == "Coverage gap: 100% required but only 60% installed"

    def test_no_gap_without_systems(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected([], installed=0.0), None, 5, "reliable")
        assert "COVERAGE_GAP" not in _codes(flags)

    def test_not_required(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(required=0.0, installed=50.0), 4, 5, "reliable")
        (flag,) = flags
        assert flag.code == "NOT_REQUIRED"
        assert flag.severity == Severity.INFO


class TestRatingWaterMismatch:
    def test_high_rating_weak_water(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(["gaseous"]), 5, 2, "unknown")
        assert _codes(flags) == ["RATING_WATER_MISMATCH"]
        assert "5/5" in flags[0].message
        assert "2/5" in flags[0].message

    def test_not_when_water_adequate(self, flag_engine: FlagEngine) -> None:
        assert flag_engine.evaluate(_protected(), 4, 3, "unknown") == []

    def test_not_when_unrated(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(["gaseous"]), None, 1, "unknown")
        assert "RATING_WATER_MISMATCH" not in _codes(flags)


class TestMissingStandard:
    def test_missing_standard(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(_protected(standard="  "), 4, 5, "reliable")
        assert _codes(flags) == ["MISSING_STANDARD"]
        assert flags[0].severity == Severity.INFO

    def test_not_when_nothing_installed(self, flag_engine: FlagEngine) -> None:
        data = BuildingProtectionData()
        assert flag_engine.evaluate(data, None, 3, "unknown") == []


# ---------------------------------------------------------------------------
# Ordering and non-interference
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_rules_run_in_fixed_order(self, flag_engine: FlagEngine) -> None:
        data = _protected(installed=50.0, standard="")
        flags = flag_engine.evaluate(data, 5, 1, "unreliable")
        assert _codes(flags) == [
            "COVERAGE_GAP",
            "WATER_DEPENDENCY",
            "RATING_WATER_MISMATCH",
            "MISSING_STANDARD",
        ]

    def test_repeatable(self, flag_engine: FlagEngine) -> None:
        data = _protected(installed=50.0, standard="")
        first = flag_engine.evaluate(data, 5, 1, "unreliable")
        second = flag_engine.evaluate(data, 5, 1, "unreliable")
        assert first == second

    def test_custom_rule_set(self) -> None:
        engine = FlagEngine(ScoringConfig(), rules=DEFAULT_FLAG_RULES[:1])
        flags = engine.evaluate(_protected(installed=50.0, standard=""), 5, 1, "unreliable")
        assert _codes(flags) == ["COVERAGE_GAP"]


class TestNonInterference:
    def test_input_not_mutated(self, flag_engine: FlagEngine) -> None:
        data = _protected(installed=50.0, standard="")
        snapshot = data.model_copy(deep=True)
        flag_engine.evaluate(data, 5, 1, "unreliable")
        assert data == snapshot

    def test_ratings_unchanged_by_flags(self, flag_engine: FlagEngine) -> None:
        calculator = BuildingScoreCalculator(RatingNormalizer(ScoringConfig()))
        data = _protected(installed=50.0, standard="", rating=5)
        before = calculator.component_score(data)
        flag_engine.evaluate(data, before, 1, "unreliable")
        assert calculator.component_score(data) == before == 5

    def test_rule_cannot_reach_caller_data(self) -> None:
        def meddling_rule(ctx: FlagContext) -> AdvisoryFlag | None:
            ctx.data.rating = 1
            ctx.data.installed_systems.clear()
            return None

        engine = FlagEngine(ScoringConfig(), rules=(meddling_rule,))
        data = _protected(rating=5)
        engine.evaluate(data, 5, 5, "reliable")
        assert data.rating == 5
        assert data.installed_systems == [SystemType.SPRINKLERS]

    def test_context_is_frozen(self) -> None:
        ctx = FlagContext(
            data=_protected(),
            component_score=4,
            water_score=3,
            water_reliability=WaterReliability.UNKNOWN,
            config=ScoringConfig(),
        )
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.component_score = 1  # type: ignore[misc]


class TestMalformedInput:
    def test_odd_scores_do_not_raise(self, flag_engine: FlagEngine) -> None:
        flags = flag_engine.evaluate(BuildingProtectionData(), "abc", None, 17)  # type: ignore[arg-type]
        assert flags == []
