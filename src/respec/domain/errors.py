"""Domain exceptions raised by the graph accessor, resolver and artifact manager."""

from __future__ import annotations


class RespecError(Exception):
    """Base class for engine failures surfaced to collaborators."""


class NotInitializedError(RespecError, RuntimeError):
    """Raised when a component is used before it has been set up."""


class DatasetNotLoadedError(NotInitializedError):
    """Raised when graph access happens before a dataset is attached."""

    def __init__(self) -> None:
        super().__init__("Specification dataset is not loaded")


class NotFoundError(RespecError, LookupError):
    """Raised when a directly requested identifier does not exist."""


class SpecificationNotFoundError(NotFoundError):
    def __init__(self, specification_id: str) -> None:
        self.specification_id = specification_id
        super().__init__(f"Specification {specification_id} not found in dataset")


class ConflictNotFoundError(NotFoundError):
    def __init__(self, conflict_id: str) -> None:
        self.conflict_id = conflict_id
        super().__init__(f"Conflict {conflict_id} not found")


class ResolutionOptionNotFoundError(NotFoundError):
    def __init__(self, conflict_id: str, resolution_id: str) -> None:
        self.conflict_id = conflict_id
        self.resolution_id = resolution_id
        super().__init__(f"Resolution {resolution_id} not found for conflict {conflict_id}")


class IntegrityViolationError(RespecError, RuntimeError):
    """Raised when bucket state disagrees with a resolution plan."""

    def __init__(self, message: str, *, node_id: str | None = None) -> None:
        self.node_id = node_id
        super().__init__(message)


class StaleResolutionError(IntegrityViolationError):
    """Raised when a winning node can no longer be found in either bucket."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            f"Winning specification {node_id} not found; conflict is stale", node_id=node_id
        )
