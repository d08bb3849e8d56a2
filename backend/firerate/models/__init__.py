"""Domain models for the FireRate engine."""

from firerate.models.building import (
    Building,
    BuildingProtectionData,
    BuildingProtectionRecord,
    DetectionData,
    create_default_building_record,
)
from firerate.models.enums import (
    WATER_DEPENDENT_SYSTEMS,
    AdequacyTag,
    DetectionCoverage,
    MaintenanceStatus,
    MonitoringType,
    PowerResilience,
    Priority,
    PumpArrangement,
    RecommendationCategory,
    Severity,
    SystemType,
    TestingRegime,
    WaterReliability,
    WaterSupplyType,
)
from firerate.models.results import (
    AdvisoryFlag,
    BuildingAssessment,
    DataQualityNote,
    PortfolioRollup,
    RecommendationDraft,
    SiteAssessment,
)
from firerate.models.site import SiteWaterContext, create_default_site_water_context

__all__ = [
    "WATER_DEPENDENT_SYSTEMS",
    "AdequacyTag",
    "AdvisoryFlag",
    "Building",
    "BuildingAssessment",
    "BuildingProtectionData",
    "BuildingProtectionRecord",
    "DataQualityNote",
    "DetectionCoverage",
    "DetectionData",
    "MaintenanceStatus",
    "MonitoringType",
    "PortfolioRollup",
    "PowerResilience",
    "Priority",
    "PumpArrangement",
    "RecommendationCategory",
    "RecommendationDraft",
    "Severity",
    "SiteAssessment",
    "SiteWaterContext",
    "SystemType",
    "TestingRegime",
    "WaterReliability",
    "WaterSupplyType",
    "create_default_building_record",
    "create_default_site_water_context",
]
