"""Deterministic remediation recommendation drafts.

Every rule is a predicate over one building (or the site) that emits zero
or one :class:`RecommendationDraft`. Identical input state always yields
identical drafts in identical order: buildings are visited in building-id
order, rules in a fixed order, and site rules last. Draft ids are built
from the scope and rule code so they stay stable between revisions.

Drafts are proposals only. Acceptance, editing and close-out belong to the
downstream recommendations workflow.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from firerate.data.rating_tables import RATING_DESCRIPTIONS
from firerate.models.coercion import NEUTRAL_RATING
from firerate.models.enums import (
    Priority,
    RecommendationCategory,
    WaterReliability,
)
from firerate.models.results import RecommendationDraft

if TYPE_CHECKING:
    from collections.abc import Iterable

    from firerate.models.building import BuildingProtectionRecord
    from firerate.models.site import SiteWaterContext
    from firerate.normalizer import RatingNormalizer
    from firerate.scoring.building import BuildingScoreCalculator
    from firerate.scoring.site import SiteScoreCalculator

logger = logging.getLogger(__name__)

_HIGH_RATING_CEILING = 2


def priority_for_rating(rating: int, *, low_at_neutral: bool = False) -> Priority | None:
    """Map an underlying 1-5 rating to a recommendation priority.

    <= 2 is high priority; 3 is low priority only for rules that opt in;
    >= 4 needs no recommendation.
    """
    if rating <= _HIGH_RATING_CEILING:
        return Priority.HIGH
    if rating == NEUTRAL_RATING and low_at_neutral:
        return Priority.LOW
    return None


def building_recommendation_id(building_id: str, code: str) -> str:
    return f"building:{building_id}:{code}"


def site_recommendation_id(code: str) -> str:
    return f"site:{code}"


@dataclass(frozen=True)
class BuildingRuleContext:
    record: BuildingProtectionRecord
    suppression_score: int | None
    normalizer: RatingNormalizer


@dataclass(frozen=True)
class SiteRuleContext:
    site: SiteWaterContext
    water_score: int
    normalizer: RatingNormalizer


BuildingRule = Callable[[BuildingRuleContext], RecommendationDraft | None]
SiteRule = Callable[[SiteRuleContext], RecommendationDraft | None]


# ----------------------------------------------------------------------
# Building rules
# ----------------------------------------------------------------------


def suppression_inadequate_rule(ctx: BuildingRuleContext) -> RecommendationDraft | None:
    # Rated on suppression alone; detection has its own rule.
    rating = ctx.suppression_score
    if rating is None:
        return None
    priority = priority_for_rating(rating)
    if priority is None:
        return None
    building_id = ctx.record.building_id
    code = "SUPPRESSION_INADEQUATE"
    return RecommendationDraft(
        id=building_recommendation_id(building_id, code),
        source_building_id=building_id,
        category=RecommendationCategory.SUPPRESSION,
        priority=priority,
        code=code,
        trigger=f"suppression_rating={rating}",
        observation=(
            f"Installed fire suppression for this building is rated {rating}/5: "
            f"{RATING_DESCRIPTIONS[rating].lower()}."
        ),
        action_required=(
            "Upgrade the installed fire suppression to achieve adequate "
            "protection for the occupancy and hazard."
        ),
    )


def coverage_gap_rule(ctx: BuildingRuleContext) -> RecommendationDraft | None:
    data = ctx.record.data
    required = data.required_coverage_pct
    installed = data.installed_coverage_pct
    if required is None or installed is None or installed >= required:
        return None
    gap = required - installed
    threshold = ctx.normalizer.config.coverage_gap_high_threshold_pct
    building_id = ctx.record.building_id
    code = "COVERAGE_GAP"
    return RecommendationDraft(
        id=building_recommendation_id(building_id, code),
        source_building_id=building_id,
        category=RecommendationCategory.SUPPRESSION,
        priority=Priority.HIGH if gap >= threshold else Priority.MEDIUM,
        code=code,
        trigger=f"installed={installed:g}%_required={required:g}%",
        observation=(
            f"Protection covers {installed:g}% of the building against "
            f"{required:g}% required ({gap:g}% shortfall)."
        ),
        action_required=(
            f"Extend protection coverage from {installed:g}% to {required:g}% "
            "to meet the requirement."
        ),
    )


def maintenance_poor_rule(ctx: BuildingRuleContext) -> RecommendationDraft | None:
    data = ctx.record.data
    if not data.has_installed_systems:
        return None
    rating = ctx.normalizer.normalize("maintenance_status", data.maintenance_status)
    priority = priority_for_rating(rating)
    if priority is None:
        return None
    building_id = ctx.record.building_id
    code = "MAINTENANCE_POOR"
    return RecommendationDraft(
        id=building_recommendation_id(building_id, code),
        source_building_id=building_id,
        category=RecommendationCategory.SUPPRESSION,
        priority=priority,
        code=code,
        trigger=f"maintenance_status={data.maintenance_status.value}",
        observation="Installed protection systems are poorly maintained.",
        action_required=(
            "Establish inspection, testing and maintenance of installed "
            "protection systems to a recognised standard by a competent contractor."
        ),
    )


def detection_inadequate_rule(ctx: BuildingRuleContext) -> RecommendationDraft | None:
    detection = ctx.record.data.detection
    if detection.rating is None:
        return None
    rating = ctx.normalizer.normalize("detection_rating", detection.rating)
    priority = priority_for_rating(rating)
    if priority is None:
        return None
    building_id = ctx.record.building_id
    code = "DETECTION_INADEQUATE"
    return RecommendationDraft(
        id=building_recommendation_id(building_id, code),
        source_building_id=building_id,
        category=RecommendationCategory.DETECTION,
        priority=priority,
        code=code,
        trigger=f"detection_rating={rating}",
        observation=f"Fire detection and alarm is rated {rating}/5.",
        action_required=(
            "Upgrade the fire detection and alarm system to achieve adequate "
            "coverage and monitoring."
        ),
    )


# ----------------------------------------------------------------------
# Site rules
# ----------------------------------------------------------------------


def water_unreliable_rule(ctx: SiteRuleContext) -> RecommendationDraft | None:
    priority = priority_for_rating(ctx.water_score)
    if priority is None:
        return None
    code = "WATER_UNRELIABLE"
    return RecommendationDraft(
        id=site_recommendation_id(code),
        category=RecommendationCategory.WATER_SUPPLY,
        priority=priority,
        code=code,
        trigger=f"water_score={ctx.water_score}",
        observation=f"The fire-water supply is rated {ctx.water_score}/5.",
        action_required=(
            "Improve water supply reliability through a redundant mains "
            "connection, on-site storage or pump upgrade to support fire "
            "protection systems."
        ),
    )


def water_unknown_rule(ctx: SiteRuleContext) -> RecommendationDraft | None:
    if ctx.site.reliability != WaterReliability.UNKNOWN:
        return None
    # A weak score is already covered by the unreliable-supply rule.
    priority = priority_for_rating(ctx.water_score, low_at_neutral=True)
    if priority != Priority.LOW:
        return None
    code = "WATER_UNKNOWN"
    return RecommendationDraft(
        id=site_recommendation_id(code),
        category=RecommendationCategory.WATER_SUPPLY,
        priority=priority,
        code=code,
        trigger="water_reliability=unknown",
        observation="The reliability of the fire-water supply has not been established.",
        action_required=(
            "Conduct a water supply assessment to determine adequacy and "
            "reliability for fire protection systems."
        ),
    )


def water_testing_rule(ctx: SiteRuleContext) -> RecommendationDraft | None:
    regime = ctx.site.testing_regime
    rating = ctx.normalizer.normalize("testing_regime", regime)
    priority = priority_for_rating(rating)
    if priority is None:
        return None
    code = "WATER_TESTING"
    return RecommendationDraft(
        id=site_recommendation_id(code),
        category=RecommendationCategory.WATER_SUPPLY,
        priority=priority,
        code=code,
        trigger=f"testing_regime={regime.value}",
        observation="There is no evidence of fire-water supply or pump testing.",
        action_required=(
            "Introduce documented periodic flow and pump testing of the "
            "fire-water supply."
        ),
    )


DEFAULT_BUILDING_RULES: tuple[BuildingRule, ...] = (
    suppression_inadequate_rule,
    coverage_gap_rule,
    maintenance_poor_rule,
    detection_inadequate_rule,
)

DEFAULT_SITE_RULES: tuple[SiteRule, ...] = (
    water_unreliable_rule,
    water_unknown_rule,
    water_testing_rule,
)


class RecommendationGenerator:
    """Runs the recommendation rule set over a site and its buildings.

    Args:
        normalizer: Normalizer used by rules that rate raw observations.
        building_calculator: Derives each building's suppression rating.
        site_calculator: Derives the water score from the site context.
        building_rules: Per-building rules, evaluated in order.
        site_rules: Site rules, evaluated after every building.
    """

    def __init__(
        self,
        normalizer: RatingNormalizer,
        building_calculator: BuildingScoreCalculator,
        site_calculator: SiteScoreCalculator,
        building_rules: tuple[BuildingRule, ...] = DEFAULT_BUILDING_RULES,
        site_rules: tuple[SiteRule, ...] = DEFAULT_SITE_RULES,
    ) -> None:
        self._normalizer = normalizer
        self._building_calculator = building_calculator
        self._site_calculator = site_calculator
        self._building_rules = tuple(building_rules)
        self._site_rules = tuple(site_rules)

    def generate(
        self,
        site_context: SiteWaterContext,
        building_records: Iterable[BuildingProtectionRecord],
    ) -> list[RecommendationDraft]:
        """Generate drafts for every building, then for the site."""
        drafts: list[RecommendationDraft] = []
        seen: set[str] = set()

        for record in sorted(building_records, key=lambda r: r.building_id):
            if record.building_id in seen:
                logger.warning(
                    "Duplicate protection record for building %s; only the first is used",
                    record.building_id,
                )
                continue
            seen.add(record.building_id)

            # Recomputed from the observations so a stale stored score
            # can never drive a recommendation.
            ctx = BuildingRuleContext(
                record=record,
                suppression_score=self._building_calculator.suppression_input(record.data),
                normalizer=self._normalizer,
            )
            for rule in self._building_rules:
                draft = rule(ctx)
                if draft is not None:
                    drafts.append(draft)

        site_ctx = SiteRuleContext(
            site=site_context,
            water_score=self._site_calculator.site_water_score(site_context),
            normalizer=self._normalizer,
        )
        for site_rule in self._site_rules:
            draft = site_rule(site_ctx)
            if draft is not None:
                drafts.append(draft)

        return drafts


# ----------------------------------------------------------------------
# Views over generated drafts
# ----------------------------------------------------------------------


def summarize_recommendations(drafts: Iterable[RecommendationDraft]) -> dict[str, int]:
    """Count drafts by priority."""
    drafts = list(drafts)
    summary = {"total": len(drafts)}
    for priority in Priority:
        summary[priority.value] = sum(1 for d in drafts if d.priority == priority)
    return summary


def group_by_category(
    drafts: Iterable[RecommendationDraft],
) -> dict[RecommendationCategory, list[RecommendationDraft]]:
    grouped: dict[RecommendationCategory, list[RecommendationDraft]] = {
        category: [] for category in RecommendationCategory
    }
    for draft in drafts:
        grouped[draft.category].append(draft)
    return grouped


def recommendations_for_building(
    drafts: Iterable[RecommendationDraft], building_id: str
) -> list[RecommendationDraft]:
    return [d for d in drafts if d.source_building_id == building_id]


def site_recommendations(drafts: Iterable[RecommendationDraft]) -> list[RecommendationDraft]:
    return [d for d in drafts if d.source_building_id is None]
