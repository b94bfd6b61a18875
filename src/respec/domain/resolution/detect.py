"""Conflict detectors for one candidate against the current selection.

Each detector is independent and returns conflicts without resolution options;
:class:`respec.domain.resolution.resolver.ConflictResolver` attaches options and
deduplicates by signature.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from respec.domain.model import (
    CascadeConflict,
    ConstraintConflict,
    ExclusionConflict,
    OverwriteConflict,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from respec.domain.graph import SpecificationGraph
    from respec.domain.model import Conflict

log = logging.getLogger(__name__)


def detect_overwrite_conflicts(
    graph: SpecificationGraph,
    candidate_id: str,
    current_selection: Sequence[str],
    *,
    ignore: Iterable[str] = (),
) -> list[OverwriteConflict]:
    node = graph.get_specification(candidate_id)
    if node is None or not node.field_name:
        return []
    if graph.is_multi_choice(node.field_name):
        return []

    skipped = {candidate_id, *ignore}
    existing = next(
        (
            selected
            for selected in current_selection
            if selected not in skipped
            and graph.get_field_for_specification(selected) == node.field_name
        ),
        None,
    )
    if existing is None:
        return []

    log.debug("Field overwrite on %s: %s -> %s", node.field_name, existing, candidate_id)
    return [
        OverwriteConflict(
            proposed_value=candidate_id,
            existing_value=existing,
            field_name=node.field_name,
            description=f'Field "{node.field_name}" already has a value',
            affected_nodes=(existing, candidate_id),
        )
    ]


def detect_exclusion_conflicts(
    graph: SpecificationGraph,
    candidate_id: str,
    current_selection: Sequence[str],
) -> list[ExclusionConflict]:
    selected = set(current_selection)
    conflicts: list[ExclusionConflict] = []
    for exclusion in graph.get_exclusions_for_node(candidate_id):
        other = exclusion.other(candidate_id)
        if other not in selected:
            continue
        log.debug("Exclusion %s hit between %s and %s", exclusion.id, candidate_id, other)
        conflicts.append(
            ExclusionConflict(
                proposed_value=candidate_id,
                existing_value=other,
                exclusion_id=exclusion.id,
                question_template=exclusion.question_template or None,
                description=exclusion.reason,
                affected_nodes=(candidate_id, other),
            )
        )
    return conflicts


def detect_cascade_conflicts(
    graph: SpecificationGraph,
    candidate_id: str,
    current_selection: Sequence[str],
) -> list[CascadeConflict]:
    """Overwrites caused by any node the candidate transitively requires.

    The walk keeps a visited set, so cyclic ``requires`` data terminates.
    """

    candidate_name = graph.node_name(candidate_id)
    conflicts: list[CascadeConflict] = []
    visited = {candidate_id}
    queue = deque(graph.get_required_nodes(candidate_id))
    while queue:
        required = queue.popleft()
        if required in visited:
            continue
        visited.add(required)
        queue.extend(graph.get_required_nodes(required))

        for overwrite in detect_overwrite_conflicts(
            graph, required, current_selection, ignore=(candidate_id,)
        ):
            conflicts.append(
                CascadeConflict(
                    proposed_value=candidate_id,
                    existing_value=overwrite.existing_value,
                    required_node=required,
                    field_name=overwrite.field_name,
                    description=f"Required by {candidate_name}: {overwrite.description}",
                    affected_nodes=(overwrite.existing_value, required, candidate_id),
                )
            )
    return conflicts


def detect_constraint_conflicts(
    graph: SpecificationGraph,
    candidate_id: str,
    current_selection: Sequence[str],
) -> list[ConstraintConflict]:
    node = graph.get_specification(candidate_id)
    if node is None or not node.field_name:
        return []

    hypothetical = [*current_selection, candidate_id]
    if graph.get_valid_options_for_field(node.field_name, hypothetical):
        return []

    log.debug("Field %s has no valid options once %s is added", node.field_name, candidate_id)
    selection = tuple(dict.fromkeys(current_selection))
    return [
        ConstraintConflict(
            proposed_value=candidate_id,
            field_name=node.field_name,
            description=(
                f'Adding {node.name} would leave field "{node.field_name}" with no valid options'
            ),
            affected_nodes=(*(item for item in selection if item != candidate_id), candidate_id),
        )
    ]


def deduplicate_by_signature(conflicts: Iterable[Conflict]) -> list[Conflict]:
    """Keep the first conflict per signature, preserving detection order."""

    seen: set[str] = set()
    unique: list[Conflict] = []
    for conflict in conflicts:
        if conflict.signature in seen:
            continue
        seen.add(conflict.signature)
        unique.append(conflict)
    return unique
