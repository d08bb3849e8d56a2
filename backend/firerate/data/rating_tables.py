"""Default lookup tables mapping raw observations onto the 1-5 adequacy scale.

Scale (as used on the assessment forms):

    1  Inadequate - materially below industry expectation
    2  Weak / marginal - significant gaps or reliability concerns
    3  Generally adequate - meets normal industry expectation
    4  Good - above average, reliable, minor gaps only
    5  Robust / best practice - strong, resilient, well maintained

"unknown" always maps to 3, the industry-baseline neutral default.
"""

from __future__ import annotations

RATING_DESCRIPTIONS: dict[int, str] = {
    1: "Inadequate - materially below industry expectation",
    2: "Weak / marginal - significant gaps or reliability concerns",
    3: "Generally adequate - meets normal industry expectation",
    4: "Good - above average, reliable, minor gaps only",
    5: "Robust / best practice - strong, resilient, well maintained",
}

# field name -> {enum value -> score}
ENUM_SCORES: dict[str, dict[str, int]] = {
    "water_reliability": {
        "reliable": 5,
        "unknown": 3,
        "unreliable": 1,
    },
    "pump_arrangement": {
        "duty+standby": 5,
        # No pumps: supply is gravity or mains fed, nothing to fail.
        "none": 3,
        "unknown": 3,
        "single": 2,
    },
    "power_resilience": {
        "good": 5,
        "mixed": 3,
        "unknown": 3,
        "poor": 1,
    },
    "testing_regime": {
        "documented": 5,
        "some evidence": 3,
        "unknown": 3,
        "none": 1,
    },
    "maintenance_status": {
        "good": 5,
        "mixed": 3,
        "unknown": 3,
        "poor": 1,
    },
    "adequacy": {
        "adequate": 4,
        "unknown": 3,
        "inadequate": 2,
    },
    "detection_coverage": {
        "good": 5,
        "adequate": 3,
        "unknown": 3,
        "poor": 1,
    },
    "detection_monitoring": {
        "arc": 5,
        "keyholder": 3,
        "unknown": 3,
        "none": 1,
    },
}

# field name -> (score when True, score when False)
BOOLEAN_SCORES: dict[str, tuple[int, int]] = {
    "pumps_present": (4, 3),
}

# field name -> descending (threshold_pct, score) bands; below the last band -> floor
PERCENTAGE_BANDS: dict[str, tuple[tuple[float, int], ...]] = {
    "coverage_ratio": (
        (95.0, 5),
        (80.0, 4),
        (60.0, 3),
        (30.0, 2),
    ),
}
PERCENTAGE_FLOOR_SCORE = 1

# Fields carrying a direct 1-5 engineer judgement.
RATING_FIELDS: tuple[str, ...] = ("rating", "detection_rating")

# Highest site portfolio score permitted for each water reliability.
PORTFOLIO_RELIABILITY_CAPS: dict[str, int] = {
    "unknown": 4,
    "unreliable": 3,
}
