"""Building-level scoring: component score and final active score.

The component score is a weighted mean of the building's own protection
inputs (suppression, detection). The final active score combines it with
the site water score by taking the minimum: a building's protection is
only as effective as its weakest dependency, so excellent sprinklers fed by
an unreliable supply can never rate above the supply itself.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from firerate.models.coercion import (
    NEUTRAL_RATING,
    RATING_MAX,
    clamp_rating,
    coerce_rating,
)
from firerate.models.enums import AdequacyTag, DetectionCoverage, MonitoringType

if TYPE_CHECKING:
    from firerate.models.building import BuildingProtectionData
    from firerate.normalizer import RatingNormalizer


@dataclass(frozen=True)
class ComponentInput:
    """One weighted input to the component score."""

    name: str
    weight: float
    extract: Callable[[BuildingProtectionData], int | None]


def final_active_score(component_score: object, site_water_score: object) -> int:
    """Combine a component score with the site water score.

    Returns ``min(component, water)``. An absent component score stands in
    as the neutral 3 for the combination only; it is not stored.
    """
    component = coerce_rating(component_score)
    water = coerce_rating(site_water_score)
    return min(
        NEUTRAL_RATING if component is None else component,
        NEUTRAL_RATING if water is None else water,
    )


class BuildingScoreCalculator:
    """Derives a building's own protection rating from its observations.

    Args:
        normalizer: Normalizer whose config supplies the input weights.
    """

    def __init__(self, normalizer: RatingNormalizer) -> None:
        self._normalizer = normalizer
        config = normalizer.config
        self._inputs: tuple[ComponentInput, ...] = (
            ComponentInput("suppression", config.suppression_weight, self.suppression_input),
            ComponentInput("detection", config.detection_weight, self.detection_input),
        )

    def component_inputs(self, data: BuildingProtectionData) -> dict[str, int]:
        """Return the normalized inputs that are present, keyed by name."""
        present: dict[str, int] = {}
        for component in self._inputs:
            value = component.extract(data)
            if value is not None:
                present[component.name] = value
        return present

    def has_component_evidence(self, data: BuildingProtectionData) -> bool:
        """True when at least one input backs the component score."""
        return bool(self.component_inputs(data))

    def component_score(self, data: BuildingProtectionData) -> int:
        """Compute the component score (1-5) for a building.

        Present inputs are combined by weighted mean with the weights
        renormalized over what is present. A single input passes straight
        through; no inputs at all yields the neutral 3.
        """
        present = self.component_inputs(data)
        weights = {c.name: c.weight for c in self._inputs}
        total_weight = sum(weights[name] for name in present)
        if not present:
            return NEUTRAL_RATING
        if total_weight <= 0:
            # Only zero-weighted inputs present: fall back to a plain mean.
            return clamp_rating(sum(present.values()) / len(present))
        raw = sum(score * weights[name] for name, score in present.items()) / total_weight
        return clamp_rating(raw)

    def final_active_score(self, component_score: int | None, site_water_score: int) -> int:
        return final_active_score(component_score, site_water_score)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def suppression_input(self, data: BuildingProtectionData) -> int | None:
        """Engineer rating when given, else the evidence-based suggestion."""
        if data.rating is not None:
            return self._normalizer.normalize("rating", data.rating)
        return self.suggested_suppression_score(data)

    def detection_input(self, data: BuildingProtectionData) -> int | None:
        """Detection engineer rating when given, else the suggestion."""
        if data.detection.rating is not None:
            return self._normalizer.normalize("detection_rating", data.detection.rating)
        return self.suggested_detection_score(data)

    def suggested_suppression_score(self, data: BuildingProtectionData) -> int | None:
        """Suggest a suppression rating from coverage, adequacy and maintenance.

        Returns None when there is not enough evidence: nothing installed,
        no coverage requirement, or an unknown adequacy tag.
        """
        required = data.required_coverage_pct
        if not data.has_installed_systems or not required or required <= 0:
            return None
        if data.adequacy == AdequacyTag.UNKNOWN:
            return None

        normalize = self._normalizer.normalize
        ratio_pct = min(100.0, (data.installed_coverage_pct or 0.0) / required * 100.0)
        coverage = normalize("coverage_ratio", ratio_pct)
        maintenance = normalize("maintenance_status", data.maintenance_status)
        adequacy = normalize("adequacy", data.adequacy)

        if adequacy < NEUTRAL_RATING:
            return min(adequacy, coverage)
        if coverage >= RATING_MAX and maintenance >= RATING_MAX:
            return RATING_MAX
        if coverage >= adequacy:
            return adequacy
        return NEUTRAL_RATING

    def suggested_detection_score(self, data: BuildingProtectionData) -> int | None:
        """Suggest a detection rating from coverage and monitoring.

        Coverage leads: with coverage unknown there is no suggestion. Known
        monitoring can pull the coverage score down (half-up mean of the
        two) but never lift it.
        """
        detection = data.detection
        if detection.coverage == DetectionCoverage.UNKNOWN:
            return None
        normalize = self._normalizer.normalize
        coverage = normalize("detection_coverage", detection.coverage)
        if detection.monitoring == MonitoringType.UNKNOWN:
            return coverage
        monitoring = normalize("detection_monitoring", detection.monitoring)
        return min(coverage, clamp_rating((coverage + monitoring) / 2))
