"""Formatting helpers for assessment output.

Provides human-readable ratings and areas the way surveyors quote them
(e.g. '3.3 / 5' and '12,400 m²').
"""

from __future__ import annotations

from firerate.data.rating_tables import RATING_DESCRIPTIONS
from firerate.models.coercion import coerce_rating


def format_rating(score: float) -> str:
    """Format a score on the 1-5 scale.

    - Whole numbers: '4 / 5'
    - Fractional averages: one decimal, e.g. '3.3 / 5'
    - Zero (nothing assessed): 'n/a'
    """
    if score == 0:
        return "n/a"
    if float(score).is_integer():
        return f"{score:.0f} / 5"
    return f"{score:.1f} / 5"


def format_area(area_m2: float) -> str:
    """Format an area in square metres with thousands separators."""
    return f"{area_m2:,.0f} m²"


def rating_label(score: object) -> str:
    """Short label for a rating, e.g. 'Generally adequate'."""
    rating = coerce_rating(score)
    if rating is None:
        return "Unrated"
    return RATING_DESCRIPTIONS[rating].split(" - ")[0]
