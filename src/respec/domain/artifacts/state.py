"""Mutable artifact state: the two specification buckets and the conflict ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from respec.domain.model import Bucket, LocatedSpecification

if TYPE_CHECKING:
    from collections.abc import Iterator

    from respec.domain.model import (
        Conflict,
        EscalatedConflict,
        ResolvedConflict,
        SelectedSpecification,
    )


@dataclass(slots=True)
class ConflictLedger:
    """Active, resolved and escalated conflicts plus the derived blocked state."""

    active: list[Conflict] = field(default_factory=list["Conflict"])
    resolved: list[ResolvedConflict] = field(default_factory=list["ResolvedConflict"])
    escalated: list[EscalatedConflict] = field(default_factory=list["EscalatedConflict"])
    details: dict[str, Conflict] = field(default_factory=dict["str", "Conflict"])
    blocking_nodes: set[str] = field(default_factory=set["str"])
    blocked: bool = False
    blocked_reason: str | None = None

    def find_active(self, conflict_id: str) -> Conflict | None:
        for conflict in self.active:
            if conflict.id == conflict_id:
                return conflict
        return None

    def active_signatures(self) -> set[str]:
        return {conflict.signature for conflict in self.active}

    def escalated_signatures(self) -> set[str]:
        return {entry.conflict.signature for entry in self.escalated}

    def recompute(self) -> None:
        """Derive blocking nodes and the blocked flag from the active list."""

        self.blocking_nodes = {
            node_id for conflict in self.active for node_id in conflict.affected_nodes
        }
        self.blocked = bool(self.active)
        if not self.active:
            self.blocked_reason = None
        elif len(self.active) == 1:
            self.blocked_reason = f"Unresolved conflict: {self.active[0].description}"
        else:
            self.blocked_reason = f"{len(self.active)} unresolved conflicts"


@dataclass(slots=True)
class ArtifactState:
    pending: dict[str, SelectedSpecification] = field(
        default_factory=dict["str", "SelectedSpecification"]
    )
    settled: dict[str, SelectedSpecification] = field(
        default_factory=dict["str", "SelectedSpecification"]
    )
    conflicts: ConflictLedger = field(default_factory=ConflictLedger)

    def bucket(self, bucket: Bucket) -> dict[str, SelectedSpecification]:
        return self.pending if bucket is Bucket.PENDING else self.settled

    def locate(self, specification_id: str) -> LocatedSpecification | None:
        if specification_id in self.pending:
            return LocatedSpecification(
                bucket=Bucket.PENDING, specification=self.pending[specification_id]
            )
        if specification_id in self.settled:
            return LocatedSpecification(
                bucket=Bucket.SETTLED, specification=self.settled[specification_id]
            )
        return None

    def contains(self, specification_id: str) -> bool:
        return specification_id in self.pending or specification_id in self.settled

    def iter_located(self) -> Iterator[LocatedSpecification]:
        for record in self.pending.values():
            yield LocatedSpecification(bucket=Bucket.PENDING, specification=record)
        for record in self.settled.values():
            yield LocatedSpecification(bucket=Bucket.SETTLED, specification=record)

    def selected_ids(self) -> list[str]:
        """Every selected id, pending first, in insertion order."""

        return [*self.pending, *self.settled]
