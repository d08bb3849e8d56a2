"""Factory functions for creating pre-configured AssessmentEngine instances."""

from __future__ import annotations

from firerate.config import ScoringConfig
from firerate.engine import AssessmentEngine


def create_default_engine(config: ScoringConfig | None = None) -> AssessmentEngine:
    """Create an AssessmentEngine wired up with the default rating tables.

    This is the recommended way to create an engine for typical usage. Pass
    a ``config`` to tune the rating tables for a particular jurisdiction.

    Returns:
        An AssessmentEngine ready to assess sites.

    Example::

        from firerate import create_default_engine

        engine = create_default_engine()
        assessment = engine.assess(site_context, records, buildings)
    """
    return AssessmentEngine(config or ScoringConfig())
