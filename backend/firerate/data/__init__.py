"""Default rating tables for the FireRate engine."""

from firerate.data.rating_tables import (
    BOOLEAN_SCORES,
    ENUM_SCORES,
    PERCENTAGE_BANDS,
    RATING_DESCRIPTIONS,
)

__all__ = [
    "BOOLEAN_SCORES",
    "ENUM_SCORES",
    "PERCENTAGE_BANDS",
    "RATING_DESCRIPTIONS",
]
