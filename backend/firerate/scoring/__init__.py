"""Score calculators for buildings, sites and portfolios."""

from firerate.scoring.building import BuildingScoreCalculator, final_active_score
from firerate.scoring.rollup import RollupAggregator, is_rollup_eligible
from firerate.scoring.site import SiteScoreCalculator

__all__ = [
    "BuildingScoreCalculator",
    "RollupAggregator",
    "SiteScoreCalculator",
    "final_active_score",
    "is_rollup_eligible",
]
