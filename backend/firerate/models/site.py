"""Site-level domain models for the FireRate engine."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from firerate.models.coercion import NEUTRAL_RATING, coerce_rating
from firerate.models.enums import (
    PowerResilience,
    PumpArrangement,
    TestingRegime,
    WaterReliability,
    WaterSupplyType,
    coerce_enum,
)


class SiteWaterContext(BaseModel):
    """Fire-water supply context shared by every building on a site.

    ``water_score`` is derived by the site score calculator. A fresh context
    carries the neutral default of 3.
    """

    site_id: str
    reliability: WaterReliability = WaterReliability.UNKNOWN
    supply_type: WaterSupplyType = WaterSupplyType.UNKNOWN
    pumps_present: bool | None = None
    pump_arrangement: PumpArrangement = PumpArrangement.UNKNOWN
    power_resilience: PowerResilience = PowerResilience.UNKNOWN
    testing_regime: TestingRegime = TestingRegime.UNKNOWN
    key_weaknesses: str = ""
    comments: str = ""
    water_score: int = Field(default=NEUTRAL_RATING)

    @field_validator("reliability", mode="before")
    @classmethod
    def _lenient_reliability(cls, v: object) -> WaterReliability:
        return coerce_enum(WaterReliability, v, WaterReliability.UNKNOWN)

    @field_validator("supply_type", mode="before")
    @classmethod
    def _lenient_supply(cls, v: object) -> WaterSupplyType:
        return coerce_enum(WaterSupplyType, v, WaterSupplyType.UNKNOWN)

    @field_validator("pump_arrangement", mode="before")
    @classmethod
    def _lenient_pumps(cls, v: object) -> PumpArrangement:
        return coerce_enum(PumpArrangement, v, PumpArrangement.UNKNOWN)

    @field_validator("power_resilience", mode="before")
    @classmethod
    def _lenient_power(cls, v: object) -> PowerResilience:
        return coerce_enum(PowerResilience, v, PowerResilience.UNKNOWN)

    @field_validator("testing_regime", mode="before")
    @classmethod
    def _lenient_testing(cls, v: object) -> TestingRegime:
        return coerce_enum(TestingRegime, v, TestingRegime.UNKNOWN)

    @field_validator("pumps_present", mode="before")
    @classmethod
    def _lenient_bool(cls, v: object) -> bool | None:
        return v if isinstance(v, bool) else None

    @field_validator("water_score", mode="before")
    @classmethod
    def _lenient_score(cls, v: object) -> int:
        score = coerce_rating(v)
        return NEUTRAL_RATING if score is None else score


def create_default_site_water_context(site_id: str) -> SiteWaterContext:
    """Create the all-unknown context used the first time a site is assessed."""
    return SiteWaterContext(site_id=site_id)
