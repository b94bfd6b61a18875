"""Load a specification dataset from a JSON file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import DatasetDocument
from .translator import translate_dataset

if TYPE_CHECKING:
    from pathlib import Path

    from respec.domain.model import SpecificationDataset

log = logging.getLogger(__name__)


class DatasetLoadError(ValueError):
    """Raised when a dataset file cannot be read or does not validate."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Could not load dataset {path}: {message}")


def parse_dataset(raw: str | bytes) -> SpecificationDataset:
    """Validate raw JSON text and translate it into a domain dataset."""

    document = DatasetDocument.model_validate_json(raw)
    return translate_dataset(document)


def load_dataset(path: Path) -> SpecificationDataset:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DatasetLoadError(path, str(exc)) from exc
    try:
        dataset = parse_dataset(raw)
    except ValidationError as exc:
        raise DatasetLoadError(path, f"{exc.error_count()} validation error(s)\n{exc}") from exc
    log.info("Loaded dataset from %s", path)
    return dataset
