"""Advisory flags: soft constraints layered over the engineer's ratings.

Each rule is a pure predicate over the current normalized state that
returns at most one :class:`AdvisoryFlag`. Rules never alter a rating,
never gate which ratings may be selected, and never see anything they
could mutate: they receive a frozen :class:`FlagContext`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from firerate.config import ScoringConfig
from firerate.models.coercion import NEUTRAL_RATING, RATING_MIN, coerce_rating
from firerate.models.enums import Severity, WaterReliability, coerce_enum
from firerate.models.results import AdvisoryFlag

if TYPE_CHECKING:
    from firerate.models.building import BuildingProtectionData

# Component rating at or above which a weak water supply is worth calling out.
_HIGH_COMPONENT_RATING = 4
_WEAK_WATER_RATING = 2


@dataclass(frozen=True)
class FlagContext:
    """Read-only inputs shared by every flag rule."""

    data: BuildingProtectionData
    component_score: int | None
    water_score: int
    water_reliability: WaterReliability
    config: ScoringConfig


FlagRule = Callable[[FlagContext], AdvisoryFlag | None]


def resolve_water_reliability(
    reliability: object, water_score: int
) -> WaterReliability:
    """Resolve the reliability tag, inferring it from the score if absent.

    Only an explicitly unreliable supply scores at the floor, so a floor
    score is read as unreliable.
    """
    if reliability is not None:
        return coerce_enum(WaterReliability, reliability, WaterReliability.UNKNOWN)
    if water_score <= RATING_MIN:
        return WaterReliability.UNRELIABLE
    return WaterReliability.UNKNOWN


def _pct(value: float) -> str:
    return f"{value:g}%"


def coverage_gap_rule(ctx: FlagContext) -> AdvisoryFlag | None:
    data = ctx.data
    required = data.required_coverage_pct
    installed = data.installed_coverage_pct or 0.0
    if not data.has_installed_systems or required is None or required <= installed:
        return None
    return AdvisoryFlag(
        severity=Severity.WARNING,
        code="COVERAGE_GAP",
        message=(
            f"Coverage gap: {_pct(required)} required but only "
            f"{_pct(installed)} installed"
        ),
    )


def not_required_rule(ctx: FlagContext) -> AdvisoryFlag | None:
    data = ctx.data
    installed = data.installed_coverage_pct or 0.0
    if not data.has_installed_systems or data.required_coverage_pct != 0 or installed <= 0:
        return None
    return AdvisoryFlag(
        severity=Severity.INFO,
        code="NOT_REQUIRED",
        message="Protection installed but marked as not required - verify rationale",
    )


def water_dependency_rule(ctx: FlagContext) -> AdvisoryFlag | None:
    if ctx.water_reliability != WaterReliability.UNRELIABLE:
        return None
    dependent = [s for s in ctx.data.installed_systems if s in ctx.config.water_dependent_systems]
    if not dependent:
        return None
    systems = ", ".join(s.value.replace("_", " ") for s in dependent)
    return AdvisoryFlag(
        severity=Severity.WARNING,
        code="WATER_DEPENDENCY",
        message=(
            "Site water supply is unreliable, which may affect the "
            f"effectiveness of water-based protection ({systems})"
        ),
    )


def rating_water_mismatch_rule(ctx: FlagContext) -> AdvisoryFlag | None:
    if ctx.component_score is None:
        return None
    if ctx.component_score < _HIGH_COMPONENT_RATING or ctx.water_score > _WEAK_WATER_RATING:
        return None
    return AdvisoryFlag(
        severity=Severity.WARNING,
        code="RATING_WATER_MISMATCH",
        message=(
            f"Protection rated highly ({ctx.component_score}/5) but water "
            f"supply is weak ({ctx.water_score}/5)"
        ),
    )


def missing_standard_rule(ctx: FlagContext) -> AdvisoryFlag | None:
    if not ctx.data.has_installed_systems or ctx.data.standard_reference.strip():
        return None
    return AdvisoryFlag(
        severity=Severity.INFO,
        code="MISSING_STANDARD",
        message="No design standard recorded for installed protection",
    )


DEFAULT_FLAG_RULES: tuple[FlagRule, ...] = (
    coverage_gap_rule,
    not_required_rule,
    water_dependency_rule,
    rating_water_mismatch_rule,
    missing_standard_rule,
)


class FlagEngine:
    """Evaluates advisory flag rules in a fixed order.

    Args:
        config: Scoring configuration (water-dependent system set).
        rules: Rules to evaluate; defaults to :data:`DEFAULT_FLAG_RULES`.
    """

    def __init__(
        self,
        config: ScoringConfig,
        rules: tuple[FlagRule, ...] = DEFAULT_FLAG_RULES,
    ) -> None:
        self._config = config
        self._rules = tuple(rules)

    def evaluate(
        self,
        data: BuildingProtectionData,
        component_score: int | None,
        site_water_score: int,
        water_reliability: WaterReliability | str | None = None,
    ) -> list[AdvisoryFlag]:
        """Return the flags raised for one building, in rule order."""
        component = coerce_rating(component_score)
        water = coerce_rating(site_water_score)
        if water is None:
            water = NEUTRAL_RATING
        ctx = FlagContext(
            data=data.model_copy(deep=True),
            component_score=component,
            water_score=water,
            water_reliability=resolve_water_reliability(water_reliability, water),
            config=self._config,
        )
        flags: list[AdvisoryFlag] = []
        for rule in self._rules:
            flag = rule(ctx)
            if flag is not None:
                flags.append(flag)
        return flags
