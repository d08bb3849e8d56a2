"""Injectable scoring configuration.

Every lookup table and coefficient the engine uses lives on
:class:`ScoringConfig`, so the rating philosophy can be tuned per
jurisdiction without touching the scoring code. Configurations are frozen
once built; derive a variant with ``model_copy(update=...)``.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from firerate.data import rating_tables
from firerate.exceptions import ConfigurationError
from firerate.models.coercion import NEUTRAL_RATING, RATING_MAX, RATING_MIN
from firerate.models.enums import WATER_DEPENDENT_SYSTEMS, SystemType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_VERSION = "2026.1"


def _valid(score: int) -> bool:
    return RATING_MIN <= score <= RATING_MAX


class ScoringConfig(BaseModel):
    """Lookup tables and coefficients for normalization and combination."""

    model_config = ConfigDict(frozen=True)

    version: str = DEFAULT_CONFIG_VERSION
    enum_scores: dict[str, dict[str, int]] = Field(
        default_factory=lambda: copy.deepcopy(rating_tables.ENUM_SCORES)
    )
    boolean_scores: dict[str, tuple[int, int]] = Field(
        default_factory=lambda: dict(rating_tables.BOOLEAN_SCORES)
    )
    percentage_bands: dict[str, tuple[tuple[float, int], ...]] = Field(
        default_factory=lambda: dict(rating_tables.PERCENTAGE_BANDS)
    )
    percentage_floor_score: int = rating_tables.PERCENTAGE_FLOOR_SCORE
    rating_fields: tuple[str, ...] = rating_tables.RATING_FIELDS

    # Component score weights; absent inputs drop out and the rest renormalize.
    suppression_weight: float = Field(default=0.7, ge=0)
    detection_weight: float = Field(default=0.3, ge=0)

    # Water score: reliable supply reaches 5 only when testing and power
    # normalize at or above the robust threshold; an unknown supply drops to 2
    # when either normalizes at or below the concern threshold.
    water_robust_threshold: int = 5
    water_concern_threshold: int = 1
    # Lowest pump factor that still lets a reliable supply reach 5. The
    # default 3 holds a single duty pump (2) at 4; set 1 to ignore pumps.
    water_robust_min_pump_score: int = Field(default=3, ge=1, le=5)

    portfolio_reliability_caps: dict[str, int] = Field(
        default_factory=lambda: dict(rating_tables.PORTFOLIO_RELIABILITY_CAPS)
    )
    coverage_gap_high_threshold_pct: float = Field(default=30.0, ge=0)
    water_dependent_systems: frozenset[SystemType] = WATER_DEPENDENT_SYSTEMS

    @model_validator(mode="after")
    def _check_tables(self) -> ScoringConfig:
        for field, table in self.enum_scores.items():
            for value, score in table.items():
                if not _valid(score):
                    msg = f"Score for {field}={value!r} must be 1-5, got {score}"
                    raise ValueError(msg)
            if table.get("unknown", NEUTRAL_RATING) != NEUTRAL_RATING:
                msg = f"'unknown' must map to the neutral {NEUTRAL_RATING} for {field}"
                raise ValueError(msg)
        for field, pair in self.boolean_scores.items():
            if not all(_valid(s) for s in pair):
                msg = f"Boolean scores for {field} must be 1-5, got {pair}"
                raise ValueError(msg)
        for field, bands in self.percentage_bands.items():
            thresholds = [t for t, _ in bands]
            if thresholds != sorted(thresholds, reverse=True):
                msg = f"Percentage bands for {field} must be in descending order"
                raise ValueError(msg)
            if not all(_valid(s) for _, s in bands):
                msg = f"Percentage band scores for {field} must be 1-5"
                raise ValueError(msg)
        for reliability, cap in self.portfolio_reliability_caps.items():
            if not _valid(cap):
                msg = f"Portfolio cap for {reliability!r} must be 1-5, got {cap}"
                raise ValueError(msg)
        if self.suppression_weight + self.detection_weight <= 0:
            msg = "Component weights must not both be zero"
            raise ValueError(msg)
        return self


def load_scoring_config(path: str | Path) -> ScoringConfig:
    """Load a JSON scoring configuration, overriding the defaults it names.

    Raises:
        ConfigurationError: If the file is missing or fails validation.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read scoring config {path}: {exc}"
        raise ConfigurationError(msg) from exc

    try:
        config = ScoringConfig.model_validate_json(raw)
    except ValidationError as exc:
        msg = f"Invalid scoring config {path}: {exc}"
        raise ConfigurationError(msg) from exc

    logger.info("Loaded scoring config %s (version %s)", path, config.version)
    return config
