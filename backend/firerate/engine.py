"""Core assessment engine for the FireRate library.

The AssessmentEngine turns a site's source records into derived state:

1. **Record sync**: Every building in the inventory gets a protection
   record; buildings without one get a neutral default record. Records for
   buildings no longer in the inventory are left out of the assessment
   (deleting them is the inventory's job, not ours).
2. **Water score**: Rate the site fire-water supply from its context.
3. **Building scores**: Component score from each building's own
   observations, then final active score = min(component, water).
4. **Flags**: Advisory, non-blocking flags per building.
5. **Site scores**: Area-weighted site portfolio score and the eligible
   buildings roll-up.
6. **Recommendations**: Deterministic remediation drafts.
7. **Data-quality notes**: Record every neutral default that stood in for
   missing evidence, so results stay traceable.

The engine is a pure function of its inputs. It never mutates them, never
performs I/O, and returns bit-identical results for identical inputs.
Because the water context is shared by every building, any change to it
must be followed by a full :meth:`AssessmentEngine.assess`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from firerate.flags import FlagEngine
from firerate.models.building import create_default_building_record
from firerate.models.coercion import NEUTRAL_RATING
from firerate.models.enums import WaterReliability
from firerate.models.results import (
    BuildingAssessment,
    DataQualityNote,
    SiteAssessment,
)
from firerate.normalizer import RatingNormalizer
from firerate.recommendations import RecommendationGenerator
from firerate.scoring.building import BuildingScoreCalculator, final_active_score
from firerate.scoring.rollup import RollupAggregator
from firerate.scoring.site import SiteScoreCalculator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from firerate.config import ScoringConfig
    from firerate.models.building import Building, BuildingProtectionRecord
    from firerate.models.site import SiteWaterContext

logger = logging.getLogger(__name__)

ENGINE_VERSION = "0.1.0"


class AssessmentEngine:
    """Computes every derived score, flag and recommendation for a site.

    Args:
        config: Scoring configuration (lookup tables and coefficients).
        flag_engine: Optional flag engine with a custom rule set.
        recommendation_generator: Optional generator with custom rules.

    Example::

        from firerate import create_default_engine

        engine = create_default_engine()
        assessment = engine.assess(site_context, records, buildings)
    """

    def __init__(
        self,
        config: ScoringConfig,
        flag_engine: FlagEngine | None = None,
        recommendation_generator: RecommendationGenerator | None = None,
    ) -> None:
        self._config = config
        self.normalizer = RatingNormalizer(config)
        self.building_calculator = BuildingScoreCalculator(self.normalizer)
        self.site_calculator = SiteScoreCalculator(self.normalizer)
        self.rollup_aggregator = RollupAggregator()
        self.flag_engine = flag_engine or FlagEngine(config)
        self.recommendation_generator = recommendation_generator or RecommendationGenerator(
            self.normalizer, self.building_calculator, self.site_calculator
        )

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def assess(
        self,
        site_context: SiteWaterContext,
        records: Iterable[BuildingProtectionRecord],
        inventory: Iterable[Building],
    ) -> SiteAssessment:
        """Produce the complete derived state for one site.

        Args:
            site_context: The site's water context.
            records: Stored building protection records for the site.
            inventory: Buildings currently on the site.

        Returns:
            A SiteAssessment holding updated copies of the site context and
            every building record, plus flags, scores and recommendations.
        """
        notes: list[DataQualityNote] = []
        buildings = list(inventory)
        synced = self.synchronize_records(site_context.site_id, records, buildings, notes)

        # 1. Site water score
        water_score = self.site_calculator.site_water_score(site_context)
        site = site_context.model_copy(update={"water_score": water_score})
        if site.reliability == WaterReliability.UNKNOWN:
            notes.append(
                DataQualityNote(
                    parameter="water_reliability",
                    assumed_value=WaterReliability.UNKNOWN.value,
                    reasoning=(
                        "Water supply reliability not established; "
                        f"water score resolved to {water_score}"
                    ),
                )
            )

        # 2. Per-building scores and flags
        assessments = [
            self.assess_building(record, water_score, site.reliability, notes)
            for record in synced
        ]
        updated_records = [a.record for a in assessments]

        # 3. Site-level aggregation
        portfolio_score = self.site_calculator.site_portfolio_score(
            {r.building_id: r.final_active_score for r in updated_records},
            site,
            buildings,
        )
        rollup = self.rollup_aggregator.rollup(updated_records, buildings)

        # 4. Recommendations
        recommendations = self.recommendation_generator.generate(site, updated_records)

        return SiteAssessment(
            site=site,
            buildings=assessments,
            site_portfolio_score=portfolio_score,
            rollup=rollup,
            recommendations=recommendations,
            data_quality_notes=notes,
            engine_version=ENGINE_VERSION,
            config_version=self._config.version,
        )

    def assess_building(
        self,
        record: BuildingProtectionRecord,
        water_score: int,
        water_reliability: WaterReliability | None = None,
        notes: list[DataQualityNote] | None = None,
    ) -> BuildingAssessment:
        """Score and flag a single building against a site water score."""
        data = record.data
        has_evidence = self.building_calculator.has_component_evidence(data)
        component = self.building_calculator.component_score(data) if has_evidence else None
        final = final_active_score(component, water_score)

        if component is None and notes is not None:
            notes.append(
                DataQualityNote(
                    building_id=record.building_id,
                    parameter="component_score",
                    assumed_value=str(NEUTRAL_RATING),
                    reasoning=(
                        "No suppression or detection evidence; neutral rating "
                        "used for the water combination only"
                    ),
                )
            )

        flags = self.flag_engine.evaluate(data, component, water_score, water_reliability)
        updated = record.model_copy(
            update={"component_score": component, "final_active_score": final}
        )
        return BuildingAssessment(
            record=updated,
            has_component_evidence=has_evidence,
            flags=flags,
        )

    def synchronize_records(
        self,
        site_id: str,
        records: Iterable[BuildingProtectionRecord],
        buildings: list[Building],
        notes: list[DataQualityNote] | None = None,
    ) -> list[BuildingProtectionRecord]:
        """Return exactly one record per inventory building, in inventory order."""
        by_building: dict[str, BuildingProtectionRecord] = {}
        for record in records:
            if record.building_id in by_building:
                logger.warning(
                    "Duplicate protection record for building %s; keeping the first",
                    record.building_id,
                )
                continue
            by_building[record.building_id] = record

        inventory_ids = {b.id for b in buildings}
        for building_id in sorted(set(by_building) - inventory_ids):
            logger.warning(
                "Protection record for %s has no inventory building; not assessed",
                building_id,
            )

        synced: list[BuildingProtectionRecord] = []
        seen: set[str] = set()
        for building in buildings:
            if building.id in seen:
                continue
            seen.add(building.id)
            record = by_building.get(building.id)
            if record is None:
                logger.debug("Creating default protection record for %s", building.id)
                record = create_default_building_record(site_id, building.id)
                if notes is not None:
                    notes.append(
                        DataQualityNote(
                            building_id=building.id,
                            parameter="record",
                            assumed_value="default",
                            reasoning="No protection record existed; neutral defaults created",
                        )
                    )
            synced.append(record)
        return synced
