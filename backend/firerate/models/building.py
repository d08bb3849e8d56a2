"""Building-level domain models for the FireRate engine."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from firerate.models.coercion import coerce_area, coerce_percentage, coerce_rating
from firerate.models.enums import (
    AdequacyTag,
    DetectionCoverage,
    MaintenanceStatus,
    MonitoringType,
    SystemType,
    coerce_enum,
)


class Building(BaseModel):
    """A building from the external inventory. Read-only to this engine."""

    id: str
    ref: str = ""
    description: str | None = None
    floor_area_m2: float | None = None
    footprint_m2: float | None = None

    @field_validator("floor_area_m2", "footprint_m2", mode="before")
    @classmethod
    def _lenient_area(cls, v: object) -> float | None:
        return coerce_area(v)

    @property
    def weighting_area(self) -> float | None:
        """Floor area, falling back to footprint when floor area is not positive."""
        if self.floor_area_m2 is not None and self.floor_area_m2 > 0:
            return self.floor_area_m2
        return self.footprint_m2


class DetectionData(BaseModel):
    """Fire detection and alarm observations for one building."""

    system_type: str = ""
    coverage: DetectionCoverage = DetectionCoverage.UNKNOWN
    monitoring: MonitoringType = MonitoringType.UNKNOWN
    rating: int | None = None

    @field_validator("coverage", mode="before")
    @classmethod
    def _lenient_coverage(cls, v: object) -> DetectionCoverage:
        return coerce_enum(DetectionCoverage, v, DetectionCoverage.UNKNOWN)

    @field_validator("monitoring", mode="before")
    @classmethod
    def _lenient_monitoring(cls, v: object) -> MonitoringType:
        return coerce_enum(MonitoringType, v, MonitoringType.UNKNOWN)

    @field_validator("rating", mode="before")
    @classmethod
    def _lenient_rating(cls, v: object) -> int | None:
        return coerce_rating(v)


class BuildingProtectionData(BaseModel):
    """Engineer-entered fire protection observations for one building.

    ``rating`` is the engineer's 1-5 judgement of the installed suppression.
    ``None`` means unrated, which is distinct from a deliberate rating of 3.
    """

    installed_systems: list[SystemType] = Field(default_factory=list)
    required_coverage_pct: float | None = None
    installed_coverage_pct: float | None = None
    standard_reference: str = ""
    hazard_class: str = ""
    maintenance_status: MaintenanceStatus = MaintenanceStatus.UNKNOWN
    adequacy: AdequacyTag = AdequacyTag.UNKNOWN
    rating: int | None = None
    detection: DetectionData = Field(default_factory=DetectionData)
    notes: str = ""

    @field_validator("installed_systems", mode="before")
    @classmethod
    def _lenient_systems(cls, v: object) -> list[SystemType]:
        if v is None or isinstance(v, str):
            v = [v] if v else []
        systems: set[SystemType] = set()
        if isinstance(v, (list, tuple, set, frozenset)):
            for item in v:
                member = coerce_enum(SystemType, item, None)  # type: ignore[arg-type]
                if member is not None:
                    systems.add(member)
        # Sorted so serialized records diff cleanly between revisions.
        return sorted(systems)

    @field_validator("required_coverage_pct", "installed_coverage_pct", mode="before")
    @classmethod
    def _lenient_pct(cls, v: object) -> float | None:
        return coerce_percentage(v)

    @field_validator("maintenance_status", mode="before")
    @classmethod
    def _lenient_maintenance(cls, v: object) -> MaintenanceStatus:
        return coerce_enum(MaintenanceStatus, v, MaintenanceStatus.UNKNOWN)

    @field_validator("adequacy", mode="before")
    @classmethod
    def _lenient_adequacy(cls, v: object) -> AdequacyTag:
        return coerce_enum(AdequacyTag, v, AdequacyTag.UNKNOWN)

    @field_validator("rating", mode="before")
    @classmethod
    def _lenient_rating(cls, v: object) -> int | None:
        return coerce_rating(v)

    @field_validator("detection", mode="before")
    @classmethod
    def _lenient_detection(cls, v: object) -> object:
        return {} if v is None else v

    @property
    def has_installed_systems(self) -> bool:
        return bool(self.installed_systems)


class BuildingProtectionRecord(BaseModel):
    """One building's protection record within an assessed site.

    ``component_score`` and ``final_active_score`` are derived values.
    ``None`` means they have not been computed yet.
    """

    site_id: str
    building_id: str
    data: BuildingProtectionData = Field(default_factory=BuildingProtectionData)
    component_score: int | None = None
    final_active_score: int | None = None
    comments: str = ""

    @field_validator("component_score", "final_active_score", mode="before")
    @classmethod
    def _lenient_score(cls, v: object) -> int | None:
        return coerce_rating(v)


def create_default_building_record(
    site_id: str, building_id: str
) -> BuildingProtectionRecord:
    """Create the neutral record used when a building has none yet."""
    return BuildingProtectionRecord(site_id=site_id, building_id=building_id)
