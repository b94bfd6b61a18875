"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ConflictType(StrEnum):
    FIELD_OVERWRITE = "field_overwrite"
    EXCLUSION = "exclusion"
    CASCADE = "cascade"
    FIELD_CONSTRAINT = "field_constraint"


class ExclusionType(StrEnum):
    HARD_INCOMPATIBLE = "hard_incompatible"
    PERFORMANCE_MISMATCH = "performance_mismatch"
    PERFORMANCE_WARNING = "performance_warning"
    EFFICIENCY_WARNING = "efficiency_warning"


class Attribution(StrEnum):
    """Whether a selection was asked for or auto-added to satisfy a dependency."""

    REQUIREMENT = "requirement"
    ASSUMPTION = "assumption"


class Source(StrEnum):
    USER = "user"
    LLM = "llm"
    SYSTEM = "system"
    AUTOFILL = "autofill"
    MIGRATION = "migration"
    CONFLICT_RESOLUTION = "conflict_resolution"
    DEPENDENCY = "dependency"


class Bucket(StrEnum):
    PENDING = "pending"
    SETTLED = "settled"


class SelectionType(StrEnum):
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"


class ResolutionAction(StrEnum):
    KEEP_EXISTING = "keep_existing"
    APPLY_NEW = "apply_new"
