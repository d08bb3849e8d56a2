"""Custom exception hierarchy for the FireRate engine.

Scoring code never raises on malformed observations; these exceptions
cover configuration loading and the persistence collaborators.
"""

from __future__ import annotations


class FireRateError(Exception):
    """Base exception for all FireRate errors."""


class ConfigurationError(FireRateError):
    """Raised when a scoring configuration cannot be loaded or validated."""


class PersistenceError(FireRateError):
    """Raised when a record repository write fails."""
