"""Dependency construction for FastAPI endpoints."""

from __future__ import annotations

import logging
import os

from firerate.config import load_scoring_config
from firerate.engine import AssessmentEngine
from firerate.factory import create_default_engine

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FIRERATE_SCORING_CONFIG"


def create_engine_from_env() -> AssessmentEngine:
    """Create an AssessmentEngine configured from the environment.

    Reads FIRERATE_SCORING_CONFIG as the path of a JSON scoring config.
    When it is unset the default rating tables are used.

    Raises:
        ConfigurationError: If the configured file cannot be loaded.
    """
    config_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if not config_path:
        return create_default_engine()

    logger.info("Using scoring config from %s", config_path)
    return create_default_engine(load_scoring_config(config_path))
