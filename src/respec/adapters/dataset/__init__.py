"""Specification dataset adapter (JSON file to domain dataset)."""

from __future__ import annotations

from .loader import DatasetLoadError, load_dataset, parse_dataset
from .schema import (
    DatasetDocument,
    ExclusionPayload,
    SpecificationPayload,
    UiFieldPayload,
)
from .translator import translate_dataset

__all__ = [
    "DatasetDocument",
    "DatasetLoadError",
    "ExclusionPayload",
    "SpecificationPayload",
    "UiFieldPayload",
    "load_dataset",
    "parse_dataset",
    "translate_dataset",
]
