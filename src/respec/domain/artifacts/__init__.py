"""Artifact state ownership: buckets, conflict ledger and outward views."""

from __future__ import annotations

from .forms import CLEARED_NOTE, generate_form_updates
from .manager import (
    DEFAULT_DEPENDENCY_DEPTH_LIMIT,
    DEFAULT_ESCALATION_THRESHOLD,
    ArtifactManager,
)
from .questions import build_conflict_question, option_for_choice, parse_conflict_choice
from .state import ArtifactState, ConflictLedger
from .undo import RemovalUnitOfWork
from .view import ArtifactSnapshot, ConflictView

__all__ = [
    "CLEARED_NOTE",
    "DEFAULT_DEPENDENCY_DEPTH_LIMIT",
    "DEFAULT_ESCALATION_THRESHOLD",
    "ArtifactManager",
    "ArtifactSnapshot",
    "ArtifactState",
    "ConflictLedger",
    "ConflictView",
    "RemovalUnitOfWork",
    "build_conflict_question",
    "generate_form_updates",
    "option_for_choice",
    "parse_conflict_choice",
]
