"""Lenient value coercion shared by the domain models and the normalizer.

Observations arrive from hand-entered forms. Anything that cannot be read
as a number resolves to ``None`` (absent) instead of raising.
"""

from __future__ import annotations

import math

RATING_MIN = 1
RATING_MAX = 5
NEUTRAL_RATING = 3


def as_number(value: object) -> float | None:
    """Read *value* as a finite float, or return None.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp_rating(value: float) -> int:
    """Round and clamp a raw score onto the 1-5 scale."""
    return max(RATING_MIN, min(RATING_MAX, round_half_up(value)))


def coerce_rating(value: object) -> int | None:
    number = as_number(value)
    if number is None:
        return None
    return clamp_rating(number)


def coerce_percentage(value: object) -> float | None:
    number = as_number(value)
    if number is None:
        return None
    return max(0.0, min(100.0, number))


def coerce_area(value: object) -> float | None:
    number = as_number(value)
    if number is None or number < 0:
        return None
    return number
