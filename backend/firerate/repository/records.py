"""Record repository and building inventory contracts.

The scoring engine never touches storage. These protocols describe the
collaborators around it; the in-memory implementations back the HTTP
app and the tests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from firerate.models.building import create_default_building_record
from firerate.models.site import create_default_site_water_context

if TYPE_CHECKING:
    from collections.abc import Iterable

    from firerate.models.building import Building, BuildingProtectionRecord
    from firerate.models.site import SiteWaterContext

logger = logging.getLogger(__name__)


class RecordRepository(Protocol):
    """Load/save access to site water contexts and building records."""

    def load_site_water(self, site_id: str) -> SiteWaterContext | None: ...

    def save_site_water(self, context: SiteWaterContext) -> SiteWaterContext: ...

    def list_building_records(self, site_id: str) -> list[BuildingProtectionRecord]: ...

    def save_building_record(
        self, record: BuildingProtectionRecord
    ) -> BuildingProtectionRecord: ...


class BuildingInventory(Protocol):
    """Read-only provider of the buildings on a site."""

    def list_buildings(self, site_id: str) -> list[Building]: ...


class InMemoryRecordRepository:
    """Dict-backed :class:`RecordRepository`.

    Stored models are deep-copied on the way in and out so callers can
    never alias repository state.
    """

    def __init__(self) -> None:
        self._site_water: dict[str, SiteWaterContext] = {}
        self._records: dict[tuple[str, str], BuildingProtectionRecord] = {}

    def load_site_water(self, site_id: str) -> SiteWaterContext | None:
        context = self._site_water.get(site_id)
        return None if context is None else context.model_copy(deep=True)

    def save_site_water(self, context: SiteWaterContext) -> SiteWaterContext:
        self._site_water[context.site_id] = context.model_copy(deep=True)
        return context.model_copy(deep=True)

    def list_building_records(self, site_id: str) -> list[BuildingProtectionRecord]:
        return [
            record.model_copy(deep=True)
            for (record_site, _), record in self._records.items()
            if record_site == site_id
        ]

    def save_building_record(
        self, record: BuildingProtectionRecord
    ) -> BuildingProtectionRecord:
        self._records[(record.site_id, record.building_id)] = record.model_copy(deep=True)
        return record.model_copy(deep=True)


class StaticBuildingInventory:
    """In-memory :class:`BuildingInventory` keyed by site id."""

    def __init__(self, buildings_by_site: dict[str, list[Building]] | None = None) -> None:
        self._buildings = {
            site_id: list(buildings)
            for site_id, buildings in (buildings_by_site or {}).items()
        }

    def list_buildings(self, site_id: str) -> list[Building]:
        return [b.model_copy() for b in self._buildings.get(site_id, [])]


def get_or_create_site_water(repository: RecordRepository, site_id: str) -> SiteWaterContext:
    """Load the site's water context, creating the all-unknown default if absent."""
    context = repository.load_site_water(site_id)
    if context is None:
        logger.info("Creating default site water context for %s", site_id)
        context = repository.save_site_water(create_default_site_water_context(site_id))
    return context


def ensure_records_for_buildings(
    repository: RecordRepository,
    site_id: str,
    building_ids: Iterable[str],
) -> list[BuildingProtectionRecord]:
    """Create a neutral record for every building that lacks one.

    Returns all of the site's records, including those just created.
    """
    existing = {r.building_id for r in repository.list_building_records(site_id)}
    for building_id in building_ids:
        if building_id in existing:
            continue
        logger.info("Creating default protection record for %s/%s", site_id, building_id)
        repository.save_building_record(create_default_building_record(site_id, building_id))
        existing.add(building_id)
    return repository.list_building_records(site_id)
