"""Public domain model surface."""

from __future__ import annotations

from respec.domain.model.conflicts import (
    OPTION_A,
    OPTION_B,
    CascadeConflict,
    Conflict,
    ConflictResult,
    ConstraintConflict,
    EscalatedConflict,
    ExclusionConflict,
    OverwriteConflict,
    ResolutionOption,
    ResolvedConflict,
    conflict_signature,
)
from respec.domain.model.enums import (
    Attribution,
    Bucket,
    ConflictType,
    ExclusionType,
    ResolutionAction,
    SelectionType,
    Source,
)
from respec.domain.model.selection import (
    DependencyContext,
    FormUpdate,
    LocatedSpecification,
    SelectedSpecification,
)
from respec.domain.model.specification import (
    Exclusion,
    NodeId,
    SpecificationDataset,
    SpecificationNode,
    UiField,
)

__all__ = [  # noqa: RUF022
    # conflicts
    "OPTION_A",
    "OPTION_B",
    "CascadeConflict",
    "Conflict",
    "ConflictResult",
    "ConstraintConflict",
    "EscalatedConflict",
    "ExclusionConflict",
    "OverwriteConflict",
    "ResolutionOption",
    "ResolvedConflict",
    "conflict_signature",
    # enums
    "Attribution",
    "Bucket",
    "ConflictType",
    "ExclusionType",
    "ResolutionAction",
    "SelectionType",
    "Source",
    # selection
    "DependencyContext",
    "FormUpdate",
    "LocatedSpecification",
    "SelectedSpecification",
    # dataset
    "Exclusion",
    "NodeId",
    "SpecificationDataset",
    "SpecificationNode",
    "UiField",
]
