"""Enums for the FireRate domain models.

Every observation enum carries an ``UNKNOWN`` member. Values that do not
match a member are coerced to ``UNKNOWN`` by :func:`coerce_enum` rather
than rejected, so a malformed record still scores at the neutral default.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar

_E = TypeVar("_E", bound=StrEnum)


class WaterReliability(StrEnum):
    """Engineer's judgement of the site fire-water supply."""

    RELIABLE = "reliable"
    UNRELIABLE = "unreliable"
    UNKNOWN = "unknown"


class WaterSupplyType(StrEnum):
    """Source feeding the fire-water supply."""

    MAINS = "mains"
    TANK = "tank"
    DUAL = "dual"
    UNKNOWN = "unknown"


class PumpArrangement(StrEnum):
    """Fire pump redundancy."""

    NONE = "none"
    SINGLE = "single"
    DUTY_STANDBY = "duty+standby"
    UNKNOWN = "unknown"


class PowerResilience(StrEnum):
    """Resilience of the power supply to fire pumps."""

    GOOD = "good"
    MIXED = "mixed"
    POOR = "poor"
    UNKNOWN = "unknown"


class TestingRegime(StrEnum):
    """Evidence of water supply / pump testing."""

    __test__ = False

    DOCUMENTED = "documented"
    SOME_EVIDENCE = "some evidence"
    NONE = "none"
    UNKNOWN = "unknown"


class MaintenanceStatus(StrEnum):
    """Maintenance condition of installed protection systems."""

    GOOD = "good"
    MIXED = "mixed"
    POOR = "poor"
    UNKNOWN = "unknown"


class AdequacyTag(StrEnum):
    """Engineer's adequacy tag for installed suppression."""

    ADEQUATE = "adequate"
    INADEQUATE = "inadequate"
    UNKNOWN = "unknown"


class DetectionCoverage(StrEnum):
    """Coverage of the fire detection and alarm system."""

    GOOD = "good"
    ADEQUATE = "adequate"
    POOR = "poor"
    UNKNOWN = "unknown"


class MonitoringType(StrEnum):
    """How alarm signals are monitored."""

    ARC = "arc"
    KEYHOLDER = "keyholder"
    NONE = "none"
    UNKNOWN = "unknown"


class SystemType(StrEnum):
    """Fire protection system types that may be installed in a building."""

    SPRINKLERS = "sprinklers"
    WATER_MIST = "water_mist"
    GASEOUS = "gaseous"
    FOAM = "foam"
    OTHER = "other"


# Systems whose effectiveness depends on the site fire-water supply.
WATER_DEPENDENT_SYSTEMS: frozenset[SystemType] = frozenset(
    {SystemType.SPRINKLERS, SystemType.WATER_MIST, SystemType.FOAM}
)


class Severity(StrEnum):
    """Severity of an advisory flag."""

    INFO = "info"
    WARNING = "warning"


class Priority(StrEnum):
    """Priority of a recommendation draft."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationCategory(StrEnum):
    """Subsystem a recommendation originates from."""

    SUPPRESSION = "suppression"
    DETECTION = "detection"
    WATER_SUPPLY = "water_supply"


def coerce_enum(enum_cls: type[_E], value: object, default: _E) -> _E:
    """Resolve *value* to a member of *enum_cls*, falling back to *default*.

    Matching is case-insensitive and ignores surrounding whitespace, so
    ``"Duty+Standby"`` and ``" RELIABLE "`` both resolve.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for member in enum_cls:
            if member.value == key:
                return member
    return default
