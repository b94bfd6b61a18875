"""Conflict records and the two-option resolution protocol.

Conflicts form one tagged union discriminated by ``type``. Every variant carries
the candidate that triggered detection (``proposed_value``), the node ids the
conflict spans (``affected_nodes``) and exactly two resolution options once
the resolver has generated them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal, TypeAlias
from uuid import uuid4

from .enums import ConflictType, ResolutionAction

OPTION_A = "option-a"
OPTION_B = "option-b"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_conflict_id() -> str:
    return str(uuid4())


def conflict_signature(conflict_type: ConflictType, affected_nodes: tuple[str, ...]) -> str:
    """Deduplication key: conflict type plus sorted unique affected node ids."""

    return f"{conflict_type}:{'|'.join(sorted(set(affected_nodes)))}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolutionOption:
    id: str
    description: str
    action: ResolutionAction
    target_nodes: tuple[str, ...]
    expected_outcome: str


@dataclass(slots=True, kw_only=True)
class _ConflictBase:
    proposed_value: str
    description: str
    affected_nodes: tuple[str, ...]
    id: str = field(default_factory=_new_conflict_id)
    resolution_options: tuple[ResolutionOption, ...] = ()
    cycle_count: int = 0
    first_detected: datetime = field(default_factory=_utcnow)
    last_updated: datetime = field(default_factory=_utcnow)

    def option(self, option_id: str) -> ResolutionOption | None:
        for option in self.resolution_options:
            if option.id == option_id:
                return option
        return None

    def touches(self, node_ids: set[str] | frozenset[str]) -> bool:
        return any(node_id in node_ids for node_id in self.affected_nodes)


@dataclass(slots=True, kw_only=True)
class OverwriteConflict(_ConflictBase):
    """Candidate's field already holds a different selected node."""

    field_name: str
    existing_value: str
    type: Literal[ConflictType.FIELD_OVERWRITE] = ConflictType.FIELD_OVERWRITE

    @property
    def signature(self) -> str:
        return conflict_signature(self.type, self.affected_nodes)


@dataclass(slots=True, kw_only=True)
class ExclusionConflict(_ConflictBase):
    """Candidate is declared incompatible with an already selected node."""

    existing_value: str
    exclusion_id: str
    question_template: str | None = None
    type: Literal[ConflictType.EXCLUSION] = ConflictType.EXCLUSION

    @property
    def signature(self) -> str:
        return conflict_signature(self.type, self.affected_nodes)


@dataclass(slots=True, kw_only=True)
class CascadeConflict(_ConflictBase):
    """A node required by the candidate would overwrite an existing selection."""

    existing_value: str
    required_node: str
    field_name: str
    type: Literal[ConflictType.CASCADE] = ConflictType.CASCADE

    @property
    def signature(self) -> str:
        return conflict_signature(self.type, self.affected_nodes)


@dataclass(slots=True, kw_only=True)
class ConstraintConflict(_ConflictBase):
    """Adding the candidate leaves its own field with no valid option."""

    field_name: str
    type: Literal[ConflictType.FIELD_CONSTRAINT] = ConflictType.FIELD_CONSTRAINT

    @property
    def signature(self) -> str:
        return conflict_signature(self.type, self.affected_nodes)


Conflict: TypeAlias = OverwriteConflict | ExclusionConflict | CascadeConflict | ConstraintConflict


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedConflict:
    conflict: Conflict
    resolution: ResolutionOption
    resolved_by: str
    resolved_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True, kw_only=True)
class EscalatedConflict:
    conflict: Conflict
    reason: str
    escalated_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictResult:
    """Summary returned from conflict registration."""

    has_conflict: bool
    conflicts: tuple[Conflict, ...] = ()
    registered: tuple[Conflict, ...] = ()
