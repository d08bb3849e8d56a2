"""Portfolio roll-up: area-weighted average of final active scores.

Only eligible buildings take part. A building is eligible when it has a
final active score and its required coverage is strictly above 0%. Where
protection is not required the rating says nothing about the portfolio,
so it must neither dilute nor inflate the average.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from firerate.models.results import PortfolioRollup

if TYPE_CHECKING:
    from collections.abc import Iterable

    from firerate.models.building import Building, BuildingProtectionRecord

logger = logging.getLogger(__name__)


def is_rollup_eligible(record: BuildingProtectionRecord) -> bool:
    required = record.data.required_coverage_pct
    return (
        record.final_active_score is not None
        and required is not None
        and required > 0
    )


class RollupAggregator:
    """Builds the :class:`PortfolioRollup` for a set of building records."""

    def rollup(
        self,
        records: Iterable[BuildingProtectionRecord],
        inventory: Iterable[Building],
    ) -> PortfolioRollup:
        """Aggregate eligible records weighted by building area.

        The weight is the floor area, or the footprint when floor area is
        not positive. Records with no inventory entry or no positive area are
        skipped. With nothing to aggregate the result is an explicit zero.
        """
        areas = {b.id: b.weighting_area for b in inventory}

        weighted_sum = 0.0
        total_area = 0.0
        assessed = 0
        for record in sorted(records, key=lambda r: r.building_id):
            if not is_rollup_eligible(record):
                continue
            if record.building_id not in areas:
                logger.debug("Record for %s has no inventory entry; skipped", record.building_id)
                continue
            area = areas[record.building_id]
            if area is None or area <= 0:
                logger.debug("Building %s has no usable area; skipped", record.building_id)
                continue
            weighted_sum += record.final_active_score * area  # type: ignore[operator]
            total_area += area
            assessed += 1

        if assessed == 0 or total_area <= 0:
            return PortfolioRollup(
                average_score=0.0, buildings_assessed=0, total_weighted_area=0.0
            )

        return PortfolioRollup(
            average_score=weighted_sum / total_area,
            buildings_assessed=assessed,
            total_weighted_area=total_area,
        )
