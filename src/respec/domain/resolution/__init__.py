"""Conflict detection, option generation and resolution planning."""

from __future__ import annotations

from .detect import (
    deduplicate_by_signature,
    detect_cascade_conflicts,
    detect_constraint_conflicts,
    detect_exclusion_conflicts,
    detect_overwrite_conflicts,
)
from .options import (
    ConflictImpact,
    generate_resolution_options,
    get_conflict_impact,
    parse_question_template,
    transitive_requirements,
)
from .plan import ResolutionPlan, SpecificationLocator, plan_resolution
from .resolver import ConflictResolver

__all__ = [
    "ConflictImpact",
    "ConflictResolver",
    "ResolutionPlan",
    "SpecificationLocator",
    "deduplicate_by_signature",
    "detect_cascade_conflicts",
    "detect_constraint_conflicts",
    "detect_exclusion_conflicts",
    "detect_overwrite_conflicts",
    "generate_resolution_options",
    "get_conflict_impact",
    "parse_question_template",
    "plan_resolution",
    "transitive_requirements",
]
