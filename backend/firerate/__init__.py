"""FireRate fire-protection adequacy scoring engine.

Usage::

    from firerate import create_default_engine, SiteWaterContext

    engine = create_default_engine()
    assessment = engine.assess(site_context, records, buildings)
"""

from firerate.engine import AssessmentEngine
from firerate.exceptions import ConfigurationError, FireRateError, PersistenceError
from firerate.factory import create_default_engine
from firerate.functional import (
    building_component_score,
    final_active_score,
    flags,
    generate_recommendations,
    normalize_field,
    rollup,
    site_portfolio_score,
    site_water_score,
)
from firerate.models.building import (
    Building,
    BuildingProtectionData,
    BuildingProtectionRecord,
    DetectionData,
    create_default_building_record,
)
from firerate.models.enums import (
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
    "AdequacyTag",
    "AdvisoryFlag",
    "AssessmentEngine",
    "Building",
    "BuildingAssessment",
    "BuildingProtectionData",
    "BuildingProtectionRecord",
    "ConfigurationError",
    "DataQualityNote",
    "DetectionCoverage",
    "DetectionData",
    "FireRateError",
    "MaintenanceStatus",
    "MonitoringType",
    "PersistenceError",
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
    "building_component_score",
    "create_default_building_record",
    "create_default_engine",
    "create_default_site_water_context",
    "final_active_score",
    "flags",
    "generate_recommendations",
    "normalize_field",
    "rollup",
    "site_portfolio_score",
    "site_water_score",
]
