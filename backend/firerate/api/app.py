"""FastAPI application: create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from firerate.engine import ENGINE_VERSION  # noqa: E402
from firerate.exceptions import FireRateError  # noqa: E402
from firerate.models.building import (  # noqa: E402
    Building,
    BuildingProtectionData,
    BuildingProtectionRecord,
    DetectionData,
)
from firerate.models.site import SiteWaterContext  # noqa: E402

if TYPE_CHECKING:
    from firerate.engine import AssessmentEngine

logger = logging.getLogger(__name__)


class AssessmentRequest(BaseModel):
    """Body of POST /api/assess."""

    site: SiteWaterContext
    records: list[BuildingProtectionRecord] = Field(default_factory=list)
    buildings: list[Building] = Field(default_factory=list)


class NormalizeRequest(BaseModel):
    """Body of POST /api/normalize."""

    field: str
    value: Any = None


def _sample_request() -> AssessmentRequest:
    site_id = "sample-site"
    return AssessmentRequest(
        site=SiteWaterContext(
            site_id=site_id,
            reliability="unreliable",
            supply_type="mains",
            pumps_present=True,
            pump_arrangement="single",
            power_resilience="mixed",
            testing_regime="some evidence",
            key_weaknesses="Single town main, no on-site storage",
        ),
        buildings=[
            Building(id="B1", ref="B1", description="Warehouse", floor_area_m2=12_000.0),
            Building(id="B2", ref="B2", description="Offices", floor_area_m2=1_500.0),
            Building(id="B3", ref="B3", description="Gatehouse", footprint_m2=40.0),
        ],
        records=[
            BuildingProtectionRecord(
                site_id=site_id,
                building_id="B1",
                data=BuildingProtectionData(
                    installed_systems=["sprinklers"],
                    required_coverage_pct=100,
                    installed_coverage_pct=85,
                    standard_reference="BS EN 12845",
                    hazard_class="HHS",
                    maintenance_status="good",
                    adequacy="adequate",
                    rating=4,
                    detection=DetectionData(coverage="good", monitoring="arc", rating=4),
                ),
            ),
            BuildingProtectionRecord(
                site_id=site_id,
                building_id="B2",
                data=BuildingProtectionData(
                    installed_systems=["gaseous"],
                    required_coverage_pct=20,
                    installed_coverage_pct=20,
                    maintenance_status="poor",
                    rating=2,
                ),
            ),
            BuildingProtectionRecord(
                site_id=site_id,
                building_id="B3",
                data=BuildingProtectionData(required_coverage_pct=0),
            ),
        ],
    )


def create_app(*, engine: AssessmentEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    engine
        Optional pre-built engine for dependency injection (e.g. tests).
        If not provided, one is created from environment variables on the
        first request that needs it.
    """
    app = FastAPI(title="FireRate", version=ENGINE_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject a configured engine
    app.state.engine = engine

    def _get_engine() -> AssessmentEngine:
        eng: AssessmentEngine | None = app.state.engine
        if eng is not None:
            return eng
        from firerate.api.deps import create_engine_from_env

        try:
            eng = create_engine_from_env()
        except FireRateError as exc:
            logger.exception("Could not create assessment engine")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        app.state.engine = eng
        return eng

    def _assess(request: AssessmentRequest) -> dict[str, Any]:
        eng = _get_engine()
        result = eng.assess(request.site, request.records, request.buildings)
        return {
            "assessment": result.model_dump(mode="json"),
            "summary_dict": result.to_summary_dict(),
        }

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": ENGINE_VERSION}

    # ------------------------------------------------------------------
    # POST /api/assess
    # ------------------------------------------------------------------

    @app.post("/api/assess")
    def assess(request: AssessmentRequest) -> dict[str, Any]:
        return _assess(request)

    # ------------------------------------------------------------------
    # POST /api/normalize
    # ------------------------------------------------------------------

    @app.post("/api/normalize")
    def normalize(request: NormalizeRequest) -> dict[str, Any]:
        eng = _get_engine()
        return {
            "field": request.field,
            "rating": eng.normalizer.normalize(request.field, request.value),
        }

    # ------------------------------------------------------------------
    # GET /api/sample-assessment
    # ------------------------------------------------------------------

    @app.get("/api/sample-assessment")
    def sample_assessment() -> dict[str, Any]:
        return _assess(_sample_request())

    return app
