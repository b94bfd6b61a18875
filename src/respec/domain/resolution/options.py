"""Two-option resolution generation and conflict impact estimation."""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Sequence  # noqa: TC003
from dataclasses import dataclass
from functools import singledispatch
from typing import TYPE_CHECKING

from respec.domain.graph import SpecificationGraph  # noqa: TC001
from respec.domain.model import (
    OPTION_A,
    OPTION_B,
    CascadeConflict,
    ConstraintConflict,
    ExclusionConflict,
    OverwriteConflict,
    ResolutionAction,
    ResolutionOption,
)

if TYPE_CHECKING:
    from respec.domain.model import Conflict

_CHOOSE_BETWEEN = re.compile(r"choose between (.+) or (.+)", re.IGNORECASE)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictImpact:
    """What adopting the candidate of a conflict would change."""

    to_remove: tuple[str, ...]
    to_add: tuple[str, ...]
    cascade_effects: tuple[str, ...]


def parse_question_template(template: str | None) -> tuple[str, str] | None:
    """Extract the two labels of a ``"choose between X or Y"`` template."""

    if not template:
        return None
    match = _CHOOSE_BETWEEN.search(template)
    if match is None:
        return None
    first = match.group(1).strip()
    second = match.group(2).strip().rstrip("?").strip()
    if not first or not second:
        return None
    return first, second


def transitive_requirements(graph: SpecificationGraph, specification_id: str) -> list[str]:
    """Every node reachable through ``requires`` edges, in breadth-first order."""

    visited = {specification_id}
    ordered: list[str] = []
    queue = deque(graph.get_required_nodes(specification_id))
    while queue:
        node_id = queue.popleft()
        if node_id in visited:
            continue
        visited.add(node_id)
        ordered.append(node_id)
        queue.extend(graph.get_required_nodes(node_id))
    return ordered


def _adopted_nodes(
    graph: SpecificationGraph, candidate_id: str, current_selection: Sequence[str]
) -> tuple[str, ...]:
    """The candidate plus every transitive requirement that is already selected."""

    selected = set(current_selection)
    requirements = transitive_requirements(graph, candidate_id)
    kept = [node_id for node_id in requirements if node_id in selected]
    return tuple(dict.fromkeys([candidate_id, *kept]))


def get_conflict_impact(
    graph: SpecificationGraph, conflict: Conflict, current_selection: Sequence[str]
) -> ConflictImpact:
    selected = set(current_selection)
    adopted = set(_adopted_nodes(graph, conflict.proposed_value, current_selection))
    to_remove = tuple(node_id for node_id in conflict.affected_nodes if node_id not in adopted)
    removed = set(to_remove)
    requirements = transitive_requirements(graph, conflict.proposed_value)
    to_add = tuple(
        node_id
        for node_id in (conflict.proposed_value, *requirements)
        if node_id not in selected
    )
    cascade_effects = tuple(
        node_id
        for node_id in current_selection
        if node_id not in removed
        and any(required in removed for required in graph.get_required_nodes(node_id))
    )
    return ConflictImpact(to_remove=to_remove, to_add=to_add, cascade_effects=cascade_effects)


@singledispatch
def _options_for(
    conflict: object, graph: SpecificationGraph, current_selection: Sequence[str]
) -> tuple[ResolutionOption, ResolutionOption]:
    raise TypeError(f"Unsupported conflict type: {type(conflict).__name__}")


@_options_for.register
def _(
    conflict: OverwriteConflict, graph: SpecificationGraph, _current_selection: Sequence[str]
) -> tuple[ResolutionOption, ResolutionOption]:
    existing = graph.node_name(conflict.existing_value)
    proposed = graph.node_name(conflict.proposed_value)
    return (
        ResolutionOption(
            id=OPTION_A,
            description=f"Keep {existing}",
            action=ResolutionAction.KEEP_EXISTING,
            target_nodes=(conflict.existing_value,),
            expected_outcome=f"{existing} remains selected",
        ),
        ResolutionOption(
            id=OPTION_B,
            description=f"Change to {proposed}",
            action=ResolutionAction.APPLY_NEW,
            target_nodes=(conflict.proposed_value,),
            expected_outcome=f"{proposed} will replace {existing}",
        ),
    )


@_options_for.register
def _(
    conflict: ExclusionConflict, graph: SpecificationGraph, _current_selection: Sequence[str]
) -> tuple[ResolutionOption, ResolutionOption]:
    existing = graph.node_name(conflict.existing_value)
    proposed = graph.node_name(conflict.proposed_value)
    existing_label = f"Keep {existing}"
    proposed_label = f"Select {proposed}"

    # Template labels follow the order of the exclusion's node pair.
    labels = parse_question_template(conflict.question_template)
    exclusion = graph.get_exclusion_between(conflict.existing_value, conflict.proposed_value)
    if labels is not None and exclusion is not None:
        by_node = dict(zip(exclusion.nodes, labels, strict=True))
        existing_label = by_node[conflict.existing_value]
        proposed_label = by_node[conflict.proposed_value]

    return (
        ResolutionOption(
            id=OPTION_A,
            description=existing_label,
            action=ResolutionAction.KEEP_EXISTING,
            target_nodes=(conflict.existing_value,),
            expected_outcome=f"Keep {existing}",
        ),
        ResolutionOption(
            id=OPTION_B,
            description=proposed_label,
            action=ResolutionAction.APPLY_NEW,
            target_nodes=(conflict.proposed_value,),
            expected_outcome=f"Select {proposed}",
        ),
    )


@_options_for.register
def _(
    conflict: CascadeConflict, graph: SpecificationGraph, current_selection: Sequence[str]
) -> tuple[ResolutionOption, ResolutionOption]:
    proposed = graph.node_name(conflict.proposed_value)
    impact = get_conflict_impact(graph, conflict, current_selection)
    kept = tuple(
        node_id
        for node_id in conflict.affected_nodes
        if node_id not in {conflict.proposed_value, conflict.required_node}
    )
    return (
        ResolutionOption(
            id=OPTION_A,
            description="Keep existing selections",
            action=ResolutionAction.KEEP_EXISTING,
            target_nodes=kept,
            expected_outcome=f"{proposed} and its requirements will be dropped",
        ),
        ResolutionOption(
            id=OPTION_B,
            description=f"Apply {proposed} (affects {len(impact.to_remove)} items)",
            action=ResolutionAction.APPLY_NEW,
            target_nodes=_adopted_nodes(graph, conflict.proposed_value, current_selection),
            expected_outcome=(
                f"Will remove {len(impact.to_remove)} items and add {len(impact.to_add)}"
            ),
        ),
    )


@_options_for.register
def _(
    conflict: ConstraintConflict, graph: SpecificationGraph, current_selection: Sequence[str]
) -> tuple[ResolutionOption, ResolutionOption]:
    proposed = graph.node_name(conflict.proposed_value)
    impact = get_conflict_impact(graph, conflict, current_selection)
    missing = [
        node_id
        for node_id in impact.to_add
        if node_id != conflict.proposed_value
    ]
    kept = tuple(
        node_id for node_id in conflict.affected_nodes if node_id != conflict.proposed_value
    )
    return (
        ResolutionOption(
            id=OPTION_A,
            description="Keep existing selections",
            action=ResolutionAction.KEEP_EXISTING,
            target_nodes=kept,
            expected_outcome=f'Keep existing options for "{conflict.field_name}"',
        ),
        ResolutionOption(
            id=OPTION_B,
            description=f"Apply {proposed}",
            action=ResolutionAction.APPLY_NEW,
            target_nodes=_adopted_nodes(graph, conflict.proposed_value, current_selection),
            expected_outcome=(
                f"Will remove {len(impact.to_remove)} items; "
                f"{len(missing)} required items still missing"
            ),
        ),
    )


def generate_resolution_options(
    graph: SpecificationGraph, conflict: Conflict, current_selection: Sequence[str]
) -> tuple[ResolutionOption, ResolutionOption]:
    """Exactly two options per conflict: keep what is there, or adopt the candidate."""

    return _options_for(conflict, graph, current_selection)
