"""Conflict resolver composed over the specification graph.

The resolver is stateless apart from its graph reference and can be shared
between artifact managers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .detect import (
    deduplicate_by_signature,
    detect_cascade_conflicts,
    detect_constraint_conflicts,
    detect_exclusion_conflicts,
    detect_overwrite_conflicts,
)
from .options import ConflictImpact, generate_resolution_options, get_conflict_impact
from .plan import ResolutionPlan, SpecificationLocator, plan_resolution

if TYPE_CHECKING:
    from collections.abc import Sequence

    from respec.domain.graph import SpecificationGraph
    from respec.domain.model import Conflict, ResolutionOption

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ConflictResolver:
    """Detect conflicts for a candidate and plan their resolution."""

    graph: SpecificationGraph

    def detect_all_conflicts_for_specification(
        self, candidate_id: str, current_selection: Sequence[str]
    ) -> list[Conflict]:
        """Run every detector for ``candidate_id`` and attach two options to each hit."""

        others = [node_id for node_id in current_selection if node_id != candidate_id]
        detected: list[Conflict] = [
            *detect_overwrite_conflicts(self.graph, candidate_id, others),
            *detect_exclusion_conflicts(self.graph, candidate_id, others),
            *detect_cascade_conflicts(self.graph, candidate_id, others),
            *detect_constraint_conflicts(self.graph, candidate_id, others),
        ]
        conflicts = [
            replace(conflict, resolution_options=self.generate_resolution_options(conflict, others))
            for conflict in deduplicate_by_signature(detected)
        ]
        if conflicts:
            log.info("Detected %d conflict(s) for %s", len(conflicts), candidate_id)
        return conflicts

    def generate_resolution_options(
        self, conflict: Conflict, current_selection: Sequence[str]
    ) -> tuple[ResolutionOption, ResolutionOption]:
        return generate_resolution_options(self.graph, conflict, current_selection)

    def get_conflict_impact(
        self, conflict: Conflict, current_selection: Sequence[str]
    ) -> ConflictImpact:
        return get_conflict_impact(self.graph, conflict, current_selection)

    def plan_resolution(
        self,
        conflict: Conflict,
        option: ResolutionOption,
        locator: SpecificationLocator,
    ) -> ResolutionPlan:
        return plan_resolution(conflict, option, locator)
