"""Site-level scoring: water supply score and site portfolio score."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from firerate.models.coercion import (
    NEUTRAL_RATING,
    RATING_MAX,
    RATING_MIN,
    clamp_rating,
    coerce_rating,
)
from firerate.models.enums import PumpArrangement

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from firerate.models.building import Building
    from firerate.models.site import SiteWaterContext
    from firerate.normalizer import RatingNormalizer

logger = logging.getLogger(__name__)


class SiteScoreCalculator:
    """Derives site-wide scores from the water context and building scores.

    Args:
        normalizer: Normalizer whose config supplies thresholds and caps.
    """

    def __init__(self, normalizer: RatingNormalizer) -> None:
        self._normalizer = normalizer

    def site_water_score(self, context: SiteWaterContext) -> int:
        """Rate the fire-water supply (1-5).

        - Unreliable supply: 1, whatever else is known.
        - Reliable supply: 5 when testing and power resilience are both
          robust and the pump factor reaches ``water_robust_min_pump_score``,
          else 4. By default a single duty pump holds the supply at 4.
        - Unknown supply: 2 when power or testing is a clear concern,
          else the neutral 3.
        """
        normalize = self._normalizer.normalize
        config = self._normalizer.config

        reliability = normalize("water_reliability", context.reliability)
        testing = normalize("testing_regime", context.testing_regime)
        power = normalize("power_resilience", context.power_resilience)
        pumps = self.pump_factor(context)

        if reliability <= RATING_MIN:
            return RATING_MIN
        if reliability >= RATING_MAX:
            robust = config.water_robust_threshold
            min_pumps = config.water_robust_min_pump_score
            if testing >= robust and power >= robust and pumps >= min_pumps:
                return RATING_MAX
            return RATING_MAX - 1
        if min(power, testing) <= config.water_concern_threshold:
            return NEUTRAL_RATING - 1
        return NEUTRAL_RATING

    def pump_factor(self, context: SiteWaterContext) -> int:
        """Normalized pump rating: the arrangement when known, else pump presence."""
        if context.pump_arrangement != PumpArrangement.UNKNOWN:
            return self._normalizer.normalize("pump_arrangement", context.pump_arrangement)
        return self._normalizer.normalize("pumps_present", context.pumps_present)

    def site_portfolio_score(
        self,
        building_scores: Mapping[str, int | None],
        site_context: SiteWaterContext,
        building_meta: Iterable[Building] = (),
    ) -> int:
        """Combine building final active scores into one site score (1-5).

        Buildings are weighted by floor area (falling back to footprint, then
        to 1). The rounded mean is capped by water reliability. With no scored
        buildings the neutral 3 is returned.
        """
        areas = {b.id: b.weighting_area for b in building_meta}

        weighted_sum = 0.0
        total_weight = 0.0
        # Sorted so the float accumulation order never depends on input order.
        for building_id in sorted(building_scores):
            score = coerce_rating(building_scores[building_id])
            if score is None:
                continue
            area = areas.get(building_id)
            weight = area if area is not None and area > 0 else 1.0
            weighted_sum += score * weight
            total_weight += weight

        if total_weight <= 0:
            logger.debug("No scored buildings for site %s; neutral portfolio score", site_context.site_id)
            return NEUTRAL_RATING

        score = clamp_rating(weighted_sum / total_weight)
        cap = self._normalizer.config.portfolio_reliability_caps.get(
            site_context.reliability.value
        )
        if cap is not None:
            score = min(score, cap)
        return score
