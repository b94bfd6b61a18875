"""Engine configuration: dataset location and traversal/escalation limits."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import positive_int_env, require_env_vars

DATASET_PATH_ENV: Final[str] = "RESPEC_DATASET_PATH"
DEPENDENCY_DEPTH_LIMIT_ENV: Final[str] = "RESPEC_DEPENDENCY_DEPTH_LIMIT"
ESCALATION_THRESHOLD_ENV: Final[str] = "RESPEC_ESCALATION_THRESHOLD"

DEFAULT_DEPENDENCY_DEPTH_LIMIT: Final[int] = 10
DEFAULT_ESCALATION_THRESHOLD: Final[int] = 3


@dataclass(frozen=True, slots=True)
class EngineConfig:
    dataset_path: Path | None = None
    dependency_depth_limit: int = DEFAULT_DEPENDENCY_DEPTH_LIMIT
    escalation_threshold: int = DEFAULT_ESCALATION_THRESHOLD

    def resolve_dataset_path(self) -> Path | None:
        if self.dataset_path is None:
            return None
        return self.dataset_path.expanduser().resolve()


def get_engine_config(*, require_dataset: bool = False) -> EngineConfig:
    """Build an :class:`EngineConfig` from ``RESPEC_*`` environment variables."""

    if require_dataset:
        dataset_env = require_env_vars([DATASET_PATH_ENV])[DATASET_PATH_ENV]
    else:
        dataset_env = os.getenv(DATASET_PATH_ENV)
    dataset_path = Path(dataset_env.strip()) if dataset_env and dataset_env.strip() else None
    return EngineConfig(
        dataset_path=dataset_path,
        dependency_depth_limit=positive_int_env(
            DEPENDENCY_DEPTH_LIMIT_ENV, DEFAULT_DEPENDENCY_DEPTH_LIMIT
        ),
        escalation_threshold=positive_int_env(
            ESCALATION_THRESHOLD_ENV, DEFAULT_ESCALATION_THRESHOLD
        ),
    )
