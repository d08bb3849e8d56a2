"""Rating normalization: the single seam from raw observations to 1-5.

Observations come in four shapes (enumerated tags, booleans, percentages
and direct 1-5 judgements). :class:`RatingNormalizer` resolves each to the
same closed scale so downstream combination (minimum, weighted mean) never
branches on input type.

The function is total. Anything unrecognized, absent or malformed resolves
to the neutral default of 3.
"""

from __future__ import annotations

import logging
from enum import Enum

from firerate.config import ScoringConfig
from firerate.models.coercion import NEUTRAL_RATING, as_number, clamp_rating

logger = logging.getLogger(__name__)


class RatingNormalizer:
    """Maps a named observation onto the 1-5 adequacy scale.

    Args:
        config: Lookup tables to normalize against.

    Example::

        normalizer = RatingNormalizer(ScoringConfig())
        normalizer.normalize("water_reliability", "unreliable")  # -> 1
        normalizer.normalize("coverage_ratio", 82.5)              # -> 4
    """

    def __init__(self, config: ScoringConfig) -> None:
        self._config = config

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def normalize(self, field: str, raw: object) -> int:
        """Normalize *raw* for the observation named *field*."""
        config = self._config
        if field in config.enum_scores:
            return self._normalize_enum(field, raw)
        if field in config.boolean_scores:
            return self._normalize_boolean(field, raw)
        if field in config.percentage_bands:
            return self._normalize_percentage(field, raw)
        if field in config.rating_fields:
            return self._normalize_rating(raw)
        logger.debug("No rating table for field %r; using neutral default", field)
        return NEUTRAL_RATING

    def _normalize_enum(self, field: str, raw: object) -> int:
        if isinstance(raw, Enum):
            raw = raw.value
        if not isinstance(raw, str):
            return NEUTRAL_RATING
        score = self._config.enum_scores[field].get(raw.strip().lower())
        if score is None:
            logger.debug("Unrecognized %s value %r; using neutral default", field, raw)
            return NEUTRAL_RATING
        return score

    def _normalize_boolean(self, field: str, raw: object) -> int:
        if not isinstance(raw, bool):
            return NEUTRAL_RATING
        when_true, when_false = self._config.boolean_scores[field]
        return when_true if raw else when_false

    def _normalize_percentage(self, field: str, raw: object) -> int:
        number = as_number(raw)
        if number is None:
            return NEUTRAL_RATING
        pct = max(0.0, min(100.0, number))
        for threshold, score in self._config.percentage_bands[field]:
            if pct >= threshold:
                return score
        return self._config.percentage_floor_score

    def _normalize_rating(self, raw: object) -> int:
        number = as_number(raw)
        if number is None:
            return NEUTRAL_RATING
        return clamp_rating(number)
