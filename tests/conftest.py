from __future__ import annotations

import pytest

from respec.domain.artifacts import ArtifactManager
from respec.domain.graph import SpecificationGraph
from tests.helpers.datasets import make_graph, make_manager, pair_dataset, workstation_dataset


@pytest.fixture(autouse=True)
def _isolate_engine_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "RESPEC_DATASET_PATH",
        "RESPEC_DEPENDENCY_DEPTH_LIMIT",
        "RESPEC_ESCALATION_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workstation_graph() -> SpecificationGraph:
    return make_graph(workstation_dataset())


@pytest.fixture
def workstation_manager() -> ArtifactManager:
    return make_manager(workstation_dataset())


@pytest.fixture
def pair_manager() -> ArtifactManager:
    return make_manager(pair_dataset())
