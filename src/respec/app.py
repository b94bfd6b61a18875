"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from respec.adapters.dataset import load_dataset
from respec.config import ConfigurationError, EngineConfig, get_engine_config
from respec.domain.artifacts import ArtifactManager, build_conflict_question
from respec.domain.graph import SpecificationGraph
from respec.domain.model import Source
from respec.domain.resolution import ConflictResolver

if TYPE_CHECKING:
    from collections.abc import Sequence

    from respec.domain.model import FormUpdate, SpecificationDataset


log = getLogger(__name__)


def build_artifact_manager(
    config: EngineConfig | None = None,
    *,
    dataset: SpecificationDataset | None = None,
) -> ArtifactManager:
    """Wire graph, resolver and manager for one session and initialize it."""

    effective_config = config or get_engine_config()
    if dataset is None:
        dataset_path = effective_config.resolve_dataset_path()
        if dataset_path is None:
            raise ConfigurationError("No dataset configured; set RESPEC_DATASET_PATH")
        dataset = load_dataset(dataset_path)

    graph = SpecificationGraph()
    graph.load(dataset)
    manager = ArtifactManager(
        graph,
        ConflictResolver(graph),
        dependency_depth_limit=effective_config.dependency_depth_limit,
        escalation_threshold=effective_config.escalation_threshold,
    )
    manager.initialize()
    return manager


@dataclass(slots=True, kw_only=True)
class SelectionReport:
    """Outcome of replaying a list of selections and conflict answers."""

    added: list[str] = field(default_factory=list["str"])
    resolved: list[str] = field(default_factory=list["str"])
    open_questions: list[str] = field(default_factory=list["str"])
    form_updates: list[FormUpdate] = field(default_factory=list["FormUpdate"])


def replay_selections(
    manager: ArtifactManager,
    selections: Sequence[str],
    *,
    choices: Sequence[str] = (),
    original_request: str | None = None,
) -> SelectionReport:
    """Add each selection as a user choice and answer conflicts with ``choices`` in order."""

    report = SelectionReport()
    log.info("Replaying %d selection(s) with %d choice(s)", len(selections), len(choices))
    for specification_id in selections:
        manager.add(
            specification_id,
            original_request=original_request or specification_id,
            source=Source.USER,
        )
        report.added.append(specification_id)

    remaining = list(choices)
    while remaining and (conflict := manager.pending_conflict()) is not None:
        choice = remaining.pop(0)
        manager.apply_conflict_choice(conflict.id, choice)
        report.resolved.append(conflict.id)

    manager.move_non_conflicting_to_settled()
    report.open_questions = [
        build_conflict_question(conflict) for conflict in manager.conflicts.active
    ]
    report.form_updates = manager.generate_form_updates_from_settled()
    log.info(
        "Replay finished: added=%d, resolved=%d, open=%d",
        len(report.added),
        len(report.resolved),
        len(report.open_questions),
    )
    return report
