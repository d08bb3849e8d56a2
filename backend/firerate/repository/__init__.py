"""Persistence collaborators for the FireRate engine."""

from firerate.repository.records import (
    BuildingInventory,
    InMemoryRecordRepository,
    RecordRepository,
    StaticBuildingInventory,
    ensure_records_for_buildings,
    get_or_create_site_water,
)
from firerate.repository.scheduler import DebouncedSaveScheduler

__all__ = [
    "BuildingInventory",
    "DebouncedSaveScheduler",
    "InMemoryRecordRepository",
    "RecordRepository",
    "StaticBuildingInventory",
    "ensure_records_for_buildings",
    "get_or_create_site_water",
]
