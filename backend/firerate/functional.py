"""Module-level scoring functions bound to the default configuration.

Each function delegates to a shared default :class:`AssessmentEngine`.
Build your own engine with :func:`firerate.create_default_engine` to use a
tuned configuration.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from firerate.factory import create_default_engine
from firerate.models.site import create_default_site_water_context
from firerate.scoring.building import final_active_score

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from firerate.engine import AssessmentEngine
    from firerate.models.building import (
        Building,
        BuildingProtectionData,
        BuildingProtectionRecord,
    )
    from firerate.models.enums import WaterReliability
    from firerate.models.results import AdvisoryFlag, PortfolioRollup, RecommendationDraft
    from firerate.models.site import SiteWaterContext


@lru_cache(maxsize=1)
def default_engine() -> AssessmentEngine:
    return create_default_engine()


def normalize_field(field: str, raw: object) -> int:
    return default_engine().normalizer.normalize(field, raw)


def site_water_score(context: SiteWaterContext) -> int:
    return default_engine().site_calculator.site_water_score(context)


def building_component_score(data: BuildingProtectionData) -> int:
    return default_engine().building_calculator.component_score(data)


def site_portfolio_score(
    building_scores: Mapping[str, int | None],
    site_context: SiteWaterContext,
    building_meta: Iterable[Building] = (),
) -> int:
    return default_engine().site_calculator.site_portfolio_score(
        building_scores, site_context, building_meta
    )


def rollup(
    records: Iterable[BuildingProtectionRecord],
    inventory: Iterable[Building],
) -> PortfolioRollup:
    return default_engine().rollup_aggregator.rollup(records, inventory)


def flags(
    data: BuildingProtectionData,
    component_score: int | None,
    site_water_score: int,
    water_reliability: WaterReliability | str | None = None,
) -> list[AdvisoryFlag]:
    return default_engine().flag_engine.evaluate(
        data, component_score, site_water_score, water_reliability
    )


def generate_recommendations(
    site_context: SiteWaterContext,
    building_records: Iterable[BuildingProtectionRecord],
) -> list[RecommendationDraft]:
    return default_engine().recommendation_generator.generate(site_context, building_records)


__all__ = [
    "building_component_score",
    "create_default_site_water_context",
    "default_engine",
    "final_active_score",
    "flags",
    "generate_recommendations",
    "normalize_field",
    "rollup",
    "site_portfolio_score",
    "site_water_score",
]
