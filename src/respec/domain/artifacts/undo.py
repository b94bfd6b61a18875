"""Undo log for bucket removals performed while applying a resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from respec.domain.model import Bucket

if TYPE_CHECKING:
    from types import TracebackType

    from respec.domain.model import SelectedSpecification

    from .state import ArtifactState

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UndoEntry:
    bucket: Bucket
    specification: SelectedSpecification


class RemovalUnitOfWork:
    """Capture a pre-image before each removal and replay them in reverse on failure.

    Used as a context manager: an exception leaving the block restores every
    removed record to the bucket it came from and then propagates.
    """

    def __init__(self, state: ArtifactState) -> None:
        self._state = state
        self._entries: list[UndoEntry] = []

    def __enter__(self) -> RemovalUnitOfWork:
        self._entries = []
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    @property
    def removed_ids(self) -> tuple[str, ...]:
        return tuple(entry.specification.id for entry in self._entries)

    def remove(self, bucket: Bucket, specification_id: str) -> SelectedSpecification | None:
        records = self._state.bucket(bucket)
        record = records.get(specification_id)
        if record is None:
            return None
        self._entries.append(UndoEntry(bucket, record))
        del records[specification_id]
        return record

    def commit(self) -> None:
        self._entries.clear()

    def rollback(self) -> None:
        if not self._entries:
            return
        log.warning("Rolling back %d removal(s)", len(self._entries))
        for entry in reversed(self._entries):
            specification_id = entry.specification.id
            for bucket in Bucket:
                if bucket is not entry.bucket:
                    self._state.bucket(bucket).pop(specification_id, None)
            self._state.bucket(entry.bucket)[specification_id] = entry.specification
        self._entries.clear()
