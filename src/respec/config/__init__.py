"""Application configuration helpers."""

from __future__ import annotations

from .engine import (
    DEFAULT_DEPENDENCY_DEPTH_LIMIT,
    DEFAULT_ESCALATION_THRESHOLD,
    EngineConfig,
    get_engine_config,
)
from .env import positive_int_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging

__all__ = [
    "DEFAULT_DEPENDENCY_DEPTH_LIMIT",
    "DEFAULT_ESCALATION_THRESHOLD",
    "ConfigurationError",
    "EngineConfig",
    "MissingConfigurationError",
    "configure_logging",
    "get_engine_config",
    "positive_int_env",
    "require_env_vars",
]
