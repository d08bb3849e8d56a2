"""Output models produced by the FireRate engine.

None of these are persisted by the engine. They are recomputed from the
source records on every relevant change.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, computed_field

from firerate.models.building import BuildingProtectionRecord  # noqa: TCH001
from firerate.models.enums import Priority, RecommendationCategory, Severity
from firerate.models.site import SiteWaterContext  # noqa: TCH001


class AdvisoryFlag(BaseModel):
    """A non-blocking annotation layered on top of the engineer's ratings."""

    severity: Severity
    code: str
    message: str


class PortfolioRollup(BaseModel):
    """Area-weighted summary over eligible buildings.

    ``average_score`` keeps full precision. Use ``average_score_display``
    for the one-decimal figure shown to users.
    """

    average_score: float = 0.0
    buildings_assessed: int = 0
    total_weighted_area: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_score_display(self) -> float:
        return round(self.average_score, 1)


class RecommendationDraft(BaseModel):
    """A generated, not yet accepted, remediation proposal."""

    id: str
    source_building_id: str | None = None
    category: RecommendationCategory
    priority: Priority
    code: str
    trigger: str
    observation: str
    action_required: str


class DataQualityNote(BaseModel):
    """Records where a neutral default stood in for missing evidence."""

    building_id: str | None = None
    parameter: str
    assumed_value: str
    reasoning: str


class BuildingAssessment(BaseModel):
    """Derived state for one building."""

    record: BuildingProtectionRecord
    has_component_evidence: bool
    flags: list[AdvisoryFlag] = Field(default_factory=list)


class SiteAssessment(BaseModel):
    """Complete derived state for one assessed site.

    This is the primary output model of :class:`firerate.engine.AssessmentEngine`.
    """

    site: SiteWaterContext
    buildings: list[BuildingAssessment]
    site_portfolio_score: int
    rollup: PortfolioRollup
    recommendations: list[RecommendationDraft]
    data_quality_notes: list[DataQualityNote] = Field(default_factory=list)
    engine_version: str
    config_version: str

    def building(self, building_id: str) -> BuildingAssessment | None:
        for assessment in self.buildings:
            if assessment.record.building_id == building_id:
                return assessment
        return None

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict for display.

        Returns a dict of pre-formatted strings and counts.
        """
        from firerate.formatting import format_area, format_rating, rating_label
        from firerate.recommendations import summarize_recommendations

        counts = summarize_recommendations(self.recommendations)
        warnings = sum(
            1
            for b in self.buildings
            for f in b.flags
            if f.severity == Severity.WARNING
        )

        return {
            "site_id": self.site.site_id,
            "water_score_formatted": format_rating(self.site.water_score),
            "water_score_label": rating_label(self.site.water_score),
            "site_portfolio_score_formatted": format_rating(self.site_portfolio_score),
            "average_score_formatted": format_rating(self.rollup.average_score),
            "buildings_assessed": self.rollup.buildings_assessed,
            "total_weighted_area_formatted": format_area(self.rollup.total_weighted_area),
            "num_buildings": len(self.buildings),
            "num_warnings": warnings,
            "recommendations": counts,
            "num_data_quality_notes": len(self.data_quality_notes),
        }
