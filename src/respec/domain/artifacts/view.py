"""Read-only snapshot handed to the chat layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from respec.domain.graph import SpecificationGraph
    from respec.domain.model import Conflict, ConflictType

    from .state import ArtifactState


@dataclass(frozen=True, slots=True, kw_only=True)
class AffectedNodeView:
    id: str
    name: str
    field_name: str | None


@dataclass(frozen=True, slots=True, kw_only=True)
class OptionView:
    id: str
    label: str
    expected_outcome: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictView:
    id: str
    type: ConflictType
    description: str
    affected: tuple[AffectedNodeView, ...]
    options: tuple[OptionView, ...]
    cycle_count: int


@dataclass(frozen=True, slots=True, kw_only=True)
class ArtifactSnapshot:
    conflicts: tuple[ConflictView, ...]
    blocked: bool
    blocked_reason: str | None
    pending_ids: tuple[str, ...]
    settled_ids: tuple[str, ...]
    resolved_count: int
    escalated_count: int


def conflict_view(conflict: Conflict, graph: SpecificationGraph) -> ConflictView:
    return ConflictView(
        id=conflict.id,
        type=conflict.type,
        description=conflict.description,
        affected=tuple(
            AffectedNodeView(
                id=node_id,
                name=graph.node_name(node_id),
                field_name=graph.get_field_for_specification(node_id),
            )
            for node_id in conflict.affected_nodes
        ),
        options=tuple(
            OptionView(
                id=option.id,
                label=option.description,
                expected_outcome=option.expected_outcome,
            )
            for option in conflict.resolution_options
        ),
        cycle_count=conflict.cycle_count,
    )


def build_snapshot(state: ArtifactState, graph: SpecificationGraph) -> ArtifactSnapshot:
    ledger = state.conflicts
    return ArtifactSnapshot(
        conflicts=tuple(conflict_view(conflict, graph) for conflict in ledger.active),
        blocked=ledger.blocked,
        blocked_reason=ledger.blocked_reason,
        pending_ids=tuple(state.pending),
        settled_ids=tuple(state.settled),
        resolved_count=len(ledger.resolved),
        escalated_count=len(ledger.escalated),
    )
