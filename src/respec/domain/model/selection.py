"""Mutable selection records owned by the artifact manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from .enums import Attribution, Bucket, Source


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class SelectedSpecification:
    """A chosen specification held in either the pending or settled bucket."""

    id: str
    name: str
    value: object
    field_name: str | None
    attribution: Attribution = Attribution.REQUIREMENT
    confidence: float = 1.0
    source: Source = Source.USER
    original_request: str | None = None
    substitution_note: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    dependency_of: str | None = None

    @property
    def is_assumption(self) -> bool:
        return self.attribution is Attribution.ASSUMPTION

    def refreshed(self) -> SelectedSpecification:
        """Copy of this record with a fresh ``created_at`` for bucket migration."""

        return SelectedSpecification(
            id=self.id,
            name=self.name,
            value=self.value,
            field_name=self.field_name,
            attribution=self.attribution,
            confidence=self.confidence,
            source=self.source,
            original_request=self.original_request,
            substitution_note=self.substitution_note,
            dependency_of=self.dependency_of,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class LocatedSpecification:
    bucket: Bucket
    specification: SelectedSpecification


@dataclass(slots=True, kw_only=True)
class DependencyContext:
    """Traversal state threaded through a recursive dependency fill."""

    parent_id: str | None = None
    visited: set[str] = field(default_factory=set["str"])
    depth: int = 0

    def child(self, parent_id: str) -> DependencyContext:
        return DependencyContext(parent_id=parent_id, visited=self.visited, depth=self.depth + 1)


@dataclass(frozen=True, slots=True, kw_only=True)
class FormUpdate:
    """One per-field value pushed out to the form after state changes."""

    field_name: str
    value: object | None
    section: str | None = None
    confidence: float = 0.0
    is_assumption: bool = False
    original_request: str | None = None
    substitution_note: str | None = None

    @property
    def is_cleared(self) -> bool:
        return self.value is None
