"""Artifact manager: the single mutable owner of selection and conflict state.

Selections enter the ``pending`` bucket, pull in their dependencies and are
checked for conflicts. They move to ``settled`` once no active conflict
references them. Conflict resolutions are applied under a
:class:`RemovalUnitOfWork` so a failed verification leaves both buckets exactly
as they were.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from respec.domain.errors import (
    ConflictNotFoundError,
    DatasetNotLoadedError,
    IntegrityViolationError,
    NotInitializedError,
    ResolutionOptionNotFoundError,
)
from respec.domain.model import (
    Attribution,
    Bucket,
    ConflictResult,
    DependencyContext,
    EscalatedConflict,
    ResolvedConflict,
    SelectedSpecification,
    Source,
    SpecificationNode,
)
from respec.domain.resolution import ConflictResolver

from .forms import generate_form_updates
from .questions import build_conflict_question, option_for_choice
from .state import ArtifactState
from .undo import RemovalUnitOfWork
from .view import build_snapshot

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from respec.domain.graph import SpecificationGraph
    from respec.domain.model import Conflict, FormUpdate, LocatedSpecification
    from respec.domain.resolution import ResolutionPlan

    from .state import ConflictLedger
    from .view import ArtifactSnapshot

log = logging.getLogger(__name__)

DEFAULT_DEPENDENCY_DEPTH_LIMIT = 10
DEFAULT_ESCALATION_THRESHOLD = 3
DEPENDENCY_REQUEST = "Auto-added as dependency of"


class ArtifactManager:
    """Own the pending/settled buckets and the conflict lifecycle."""

    def __init__(
        self,
        graph: SpecificationGraph,
        resolver: ConflictResolver | None = None,
        *,
        dependency_depth_limit: int = DEFAULT_DEPENDENCY_DEPTH_LIMIT,
        escalation_threshold: int = DEFAULT_ESCALATION_THRESHOLD,
    ) -> None:
        self.graph = graph
        self.resolver = resolver if resolver is not None else ConflictResolver(graph)
        self.dependency_depth_limit = dependency_depth_limit
        self.escalation_threshold = escalation_threshold
        self.state = ArtifactState()
        self._initialized = False

    # Lifecycle -----------------------------------------------------------

    def initialize(self) -> None:
        if not self.graph.is_loaded:
            raise DatasetNotLoadedError
        self._initialized = True
        log.info("Artifact manager initialized")

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("Artifact manager is not initialized")

    @property
    def pending(self) -> dict[str, SelectedSpecification]:
        return self.state.pending

    @property
    def settled(self) -> dict[str, SelectedSpecification]:
        return self.state.settled

    @property
    def conflicts(self) -> ConflictLedger:
        return self.state.conflicts

    @property
    def blocked(self) -> bool:
        return self.state.conflicts.blocked

    # Additions -----------------------------------------------------------

    def add(  # noqa: PLR0913
        self,
        candidate: SpecificationNode | str,
        value: object | None = None,
        original_request: str | None = None,
        substitution_note: str | None = None,
        source: Source = Source.USER,
        dependency_context: DependencyContext | None = None,
        *,
        confidence: float = 1.0,
    ) -> ConflictResult:
        """Insert ``candidate`` into pending, fill its dependencies and scan for conflicts.

        Only user-sourced additions that are not themselves dependency fills trigger
        the incremental conflict scan.
        """

        self._require_initialized()
        node = (
            candidate
            if isinstance(candidate, SpecificationNode)
            else self.graph.require_specification(candidate)
        )
        context = dependency_context if dependency_context is not None else DependencyContext()
        is_dependency_fill = context.parent_id is not None

        record = SelectedSpecification(
            id=node.id,
            name=node.name,
            value=value if value is not None else (node.selected_value or node.name),
            field_name=node.field_name,
            attribution=Attribution.ASSUMPTION if is_dependency_fill else Attribution.REQUIREMENT,
            confidence=confidence,
            source=source,
            original_request=original_request,
            substitution_note=substitution_note,
            dependency_of=context.parent_id,
        )
        if self.state.settled.pop(node.id, None) is not None:
            log.info("Re-selected settled specification %s; moved back to pending", node.id)
        self.state.pending[node.id] = record
        log.info("Added %s to pending (source=%s, %s)", node.id, source, record.attribution)

        context.visited.add(node.id)
        self._fill_dependencies(node, context)

        if is_dependency_fill or source is not Source.USER:
            return ConflictResult(has_conflict=False)
        conflicts = self.resolver.detect_all_conflicts_for_specification(
            node.id, self.state.selected_ids()
        )
        return self.register_conflicts(conflicts)

    def _fill_dependencies(self, node: SpecificationNode, context: DependencyContext) -> None:
        if context.depth > self.dependency_depth_limit:
            log.warning(
                "Dependency depth limit %d exceeded at %s (depth=%d); stopping",
                self.dependency_depth_limit,
                node.id,
                context.depth,
            )
            return

        for required_ids in node.requires.values():
            for required_id in required_ids:
                if not required_id or required_id in context.visited:
                    continue
                context.visited.add(required_id)

                dependency = self.graph.get_specification(required_id)
                if dependency is None:
                    log.warning(
                        "Dependency %s required by %s not found in dataset; skipping",
                        required_id,
                        node.id,
                    )
                    continue

                child = context.child(node.id)
                if self.state.contains(required_id):
                    self._fill_dependencies(dependency, child)
                    continue

                default_value = dependency.selected_value or dependency.name
                if not default_value:
                    log.warning("No default value for dependency %s; skipping", required_id)
                    continue

                self.add(
                    dependency,
                    default_value,
                    original_request=f"{DEPENDENCY_REQUEST} {node.name}",
                    substitution_note=(
                        f'{dependency.field_name} "{dependency.name}" required by '
                        f'{node.field_name} "{node.name}"'
                    ),
                    source=Source.DEPENDENCY,
                    dependency_context=child,
                )

    # Conflict registration -----------------------------------------------

    def detect_exclusion_conflicts(self) -> ConflictResult:
        """Re-scan every selected node against every other one."""

        self._require_initialized()
        selected = self.state.selected_ids()
        found: dict[str, Conflict] = {}
        for node_id in selected:
            for conflict in self.resolver.detect_all_conflicts_for_specification(
                node_id, selected
            ):
                found.setdefault(conflict.signature, conflict)

        self.state.conflicts.details = {conflict.id: conflict for conflict in found.values()}
        return self.register_conflicts(found.values())

    def register_conflicts(self, conflicts: Iterable[Conflict]) -> ConflictResult:
        """Add conflicts whose signature is neither active nor escalated."""

        ledger = self.state.conflicts
        detected = tuple(conflicts)
        known = ledger.active_signatures() | ledger.escalated_signatures()
        registered: list[Conflict] = []
        for conflict in detected:
            if conflict.signature in known:
                log.debug("Conflict %s already known; skipping", conflict.signature)
                continue
            known.add(conflict.signature)
            ledger.active.append(conflict)
            registered.append(conflict)
            log.info("Registered %s conflict %s", conflict.type, conflict.signature)

        ledger.recompute()
        return ConflictResult(
            has_conflict=bool(ledger.active),
            conflicts=detected,
            registered=tuple(registered),
        )

    def pending_conflict(self) -> Conflict | None:
        return self.state.conflicts.active[0] if self.state.conflicts.active else None

    def _require_conflict(self, conflict_id: str) -> Conflict:
        conflict = self.state.conflicts.find_active(conflict_id)
        if conflict is None:
            raise ConflictNotFoundError(conflict_id)
        return conflict

    # Resolution ----------------------------------------------------------

    def resolve_conflict(
        self, conflict_id: str, resolution_id: str, *, resolved_by: str = "user"
    ) -> ResolutionPlan:
        """Apply ``resolution_id`` to the active conflict ``conflict_id``.

        Removals are verified after execution. On any failure every removed record
        is restored to its original bucket and the error propagates unchanged.
        """

        self._require_initialized()
        conflict = self._require_conflict(conflict_id)
        option = conflict.option(resolution_id)
        if option is None:
            raise ResolutionOptionNotFoundError(conflict_id, resolution_id)

        plan = self.resolver.plan_resolution(conflict, option, self)
        with RemovalUnitOfWork(self.state) as uow:
            for located in plan.removals:
                uow.remove(located.bucket, located.specification.id)
            self._verify_resolution(plan)
            removed = set(uow.removed_ids)
            uow.commit()

        ledger = self.state.conflicts
        ledger.active = [
            other
            for other in ledger.active
            if other.id == conflict.id or not other.touches(removed)
        ]
        self._prune_stale_conflicts()
        ledger.active = [
            other
            for other in ledger.active
            if other.id != conflict.id and other.signature != conflict.signature
        ]
        ledger.resolved.append(
            ResolvedConflict(conflict=conflict, resolution=option, resolved_by=resolved_by)
        )
        ledger.recompute()
        log.info(
            "Resolved conflict %s with %s; removed %s",
            conflict.signature,
            option.id,
            sorted(removed),
        )

        self.move_non_conflicting_to_settled()
        return plan

    def _verify_resolution(self, plan: ResolutionPlan) -> None:
        for loser_id in plan.removal_ids:
            if self.state.contains(loser_id):
                raise IntegrityViolationError(
                    f"Specification {loser_id} still present after removal", node_id=loser_id
                )
        for winner_id in plan.winner_ids:
            if not self.state.contains(winner_id):
                raise IntegrityViolationError(
                    f"Winning specification {winner_id} missing after resolution",
                    node_id=winner_id,
                )

    def apply_conflict_choice(self, conflict_id: str, choice: str) -> ResolutionPlan:
        """Resolve with the first option for ``"a"`` and the second for ``"b"``."""

        conflict = self._require_conflict(conflict_id)
        option = option_for_choice(conflict, choice)
        return self.resolve_conflict(conflict_id, option.id)

    def increment_conflict_cycle(self, conflict_id: str) -> Conflict:
        """Bump the retry counter; escalate once it reaches the threshold."""

        conflict = self._require_conflict(conflict_id)
        conflict.cycle_count += 1
        conflict.last_updated = datetime.now(UTC)
        if conflict.cycle_count >= self.escalation_threshold:
            ledger = self.state.conflicts
            ledger.active = [other for other in ledger.active if other.id != conflict.id]
            ledger.escalated.append(
                EscalatedConflict(
                    conflict=conflict,
                    reason=f"Max resolution cycles reached ({self.escalation_threshold})",
                )
            )
            ledger.recompute()
            log.warning(
                "Escalated conflict %s after %d cycles", conflict.signature, conflict.cycle_count
            )
        return conflict

    def _prune_stale_conflicts(self) -> None:
        ledger = self.state.conflicts
        ledger.active = [
            conflict
            for conflict in ledger.active
            if any(self.state.contains(node_id) for node_id in conflict.affected_nodes)
        ]

    def _purge_conflicts_touching(self, removed: set[str]) -> None:
        ledger = self.state.conflicts
        ledger.active = [conflict for conflict in ledger.active if not conflict.touches(removed)]
        self._prune_stale_conflicts()
        ledger.recompute()

    # Bucket migration ----------------------------------------------------

    def move_non_conflicting_to_settled(self) -> list[str]:
        """Move every pending record not implicated by an active conflict to settled."""

        self._require_initialized()
        blocking = self.state.conflicts.blocking_nodes
        movable = [node_id for node_id in self.state.pending if node_id not in blocking]
        for node_id in movable:
            record = self.state.pending.pop(node_id)
            self.state.settled[node_id] = record.refreshed()
        if movable:
            log.info("Moved %d specification(s) to settled", len(movable))
        return movable

    def clear_field_selections(self, field_name: str) -> list[str]:
        """Remove every selection mapped to ``field_name`` from both buckets."""

        self._require_initialized()
        removed: list[str] = []
        for bucket in Bucket:
            records = self.state.bucket(bucket)
            for node_id in [
                node_id
                for node_id, record in records.items()
                if (record.field_name or self.graph.get_field_for_specification(node_id))
                == field_name
            ]:
                del records[node_id]
                removed.append(node_id)
        if removed:
            log.info("Cleared field %s: removed %s", field_name, removed)
            self._purge_conflicts_touching(set(removed))
        return removed

    def prune_to_dependency_closure(self) -> list[str]:
        """Drop records unreachable from a root selection through ``requires`` edges."""

        self._require_initialized()
        roots = [
            located.specification.id
            for located in self.state.iter_located()
            if located.specification.attribution is Attribution.REQUIREMENT
            or located.specification.dependency_of is None
        ]
        allowed: set[str] = set()
        queue = deque(roots)
        while queue:
            node_id = queue.popleft()
            if node_id in allowed:
                continue
            allowed.add(node_id)
            queue.extend(self.graph.get_required_nodes(node_id))

        removed: list[str] = []
        for bucket in Bucket:
            records = self.state.bucket(bucket)
            for node_id in [node_id for node_id in records if node_id not in allowed]:
                del records[node_id]
                removed.append(node_id)
        if removed:
            log.info("Pruned %d specification(s) outside the dependency closure", len(removed))
            self._purge_conflicts_touching(set(removed))
        return removed

    # Lookups -------------------------------------------------------------

    def find_specification_in_artifact(
        self, bucket: Bucket, specification_id: str
    ) -> SelectedSpecification | None:
        return self.state.bucket(bucket).get(specification_id)

    def find_specification_in_pending(self, specification_id: str) -> SelectedSpecification | None:
        return self.find_specification_in_artifact(Bucket.PENDING, specification_id)

    def find_specification_in_settled(self, specification_id: str) -> SelectedSpecification | None:
        return self.find_specification_in_artifact(Bucket.SETTLED, specification_id)

    def find_specification_with_location(
        self, specification_id: str
    ) -> LocatedSpecification | None:
        return self.state.locate(specification_id)

    def located_specifications(self) -> Iterator[LocatedSpecification]:
        return self.state.iter_located()

    # Outward views -------------------------------------------------------

    def snapshot(self) -> ArtifactSnapshot:
        return build_snapshot(self.state, self.graph)

    def conflict_question(self, conflict_id: str) -> str:
        return build_conflict_question(self._require_conflict(conflict_id))

    def generate_form_updates_from_settled(self) -> list[FormUpdate]:
        self._require_initialized()
        return generate_form_updates(self.graph, self.state.settled)
