"""Read-only accessor over the specification dataset.

Every query fails with :class:`DatasetNotLoadedError` until :meth:`load` has
attached a dataset. Lookups over exclusions are linear scans; datasets are
small enough that no index is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import DatasetNotLoadedError, SpecificationNotFoundError
from .model import SelectionType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import Exclusion, SpecificationDataset, SpecificationNode, UiField

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DependencyCheck:
    """Per-category satisfaction of a node's ``requires`` map."""

    specification_id: str
    satisfied: bool
    missing_by_category: dict[str, tuple[str, ...]] = field(
        default_factory=dict["str", "tuple[str, ...]"]
    )


@dataclass(slots=True)
class SpecificationGraph:
    """Query surface over one loaded :class:`SpecificationDataset`."""

    _dataset: SpecificationDataset | None = None

    def load(self, dataset: SpecificationDataset) -> None:
        self._dataset = dataset
        log.info(
            "Loaded specification dataset: %d specifications, %d exclusions, %d UI fields",
            len(dataset.specifications),
            len(dataset.exclusions),
            len(dataset.ui_fields),
        )

    @property
    def is_loaded(self) -> bool:
        return self._dataset is not None

    @property
    def dataset(self) -> SpecificationDataset:
        if self._dataset is None:
            raise DatasetNotLoadedError
        return self._dataset

    # Nodes ---------------------------------------------------------------

    def get_specification(self, specification_id: str) -> SpecificationNode | None:
        return self.dataset.specifications.get(specification_id)

    def require_specification(self, specification_id: str) -> SpecificationNode:
        node = self.get_specification(specification_id)
        if node is None:
            raise SpecificationNotFoundError(specification_id)
        return node

    def all_specifications(self) -> tuple[SpecificationNode, ...]:
        return tuple(self.dataset.specifications.values())

    def node_name(self, specification_id: str) -> str:
        node = self.get_specification(specification_id)
        return node.name if node is not None else specification_id

    def get_required_nodes(self, specification_id: str) -> list[str]:
        """Every node id required by ``specification_id`` across all categories.

        Alternatives inside a category are flattened; callers treat the result as
        "these may need to exist".
        """

        node = self.get_specification(specification_id)
        if node is None:
            return []
        return list(node.required_ids)

    # Exclusions ----------------------------------------------------------

    def get_exclusions_for_node(self, specification_id: str) -> list[Exclusion]:
        return [
            exclusion
            for exclusion in self.dataset.exclusions
            if exclusion.involves(specification_id)
        ]

    def get_exclusion_between(self, first: str, second: str) -> Exclusion | None:
        if first == second:
            return None
        for exclusion in self.dataset.exclusions:
            if exclusion.involves(first) and exclusion.involves(second):
                return exclusion
        return None

    def has_exclusion_between(self, first: str, second: str) -> bool:
        return self.get_exclusion_between(first, second) is not None

    # Fields --------------------------------------------------------------

    def get_specifications_for_field(self, field_name: str) -> list[SpecificationNode]:
        return [
            node
            for node in self.dataset.specifications.values()
            if node.field_name == field_name
        ]

    def get_field_for_specification(self, specification_id: str) -> str | None:
        node = self.get_specification(specification_id)
        return node.field_name if node is not None else None

    def get_valid_options_for_field(
        self, field_name: str, current_selection: Iterable[str]
    ) -> list[SpecificationNode]:
        """Nodes of ``field_name`` not excluded by any *other* selected node."""

        selection = tuple(current_selection)
        return [
            node
            for node in self.get_specifications_for_field(field_name)
            if not any(
                self.has_exclusion_between(node.id, selected)
                for selected in selection
                if selected != node.id
            )
        ]

    def detect_field_conflicts(self, current_selection: Iterable[str]) -> list[str]:
        """Fields of the selection whose valid option list is empty."""

        selection = tuple(current_selection)
        fields: dict[str, None] = {}
        for node_id in selection:
            field_name = self.get_field_for_specification(node_id)
            if field_name:
                fields.setdefault(field_name, None)
        return [
            field_name
            for field_name in fields
            if not self.get_valid_options_for_field(field_name, selection)
        ]

    def all_form_fields(self) -> list[str]:
        seen: dict[str, None] = {}
        for node in self.dataset.specifications.values():
            if node.field_name:
                seen.setdefault(node.field_name, None)
        return list(seen)

    def ui_fields(self) -> tuple[UiField, ...]:
        return self.dataset.ui_fields

    def get_ui_field(self, field_name: str) -> UiField | None:
        for ui_field in self.dataset.ui_fields:
            if ui_field.field_name == field_name:
                return ui_field
        return None

    def known_fields(self) -> list[str]:
        """UI field names in dataset order, or every mapped field when none are declared."""

        if self.dataset.ui_fields:
            return [ui_field.field_name for ui_field in self.dataset.ui_fields]
        return self.all_form_fields()

    def is_multi_choice(self, field_name: str) -> bool:
        ui_field = self.get_ui_field(field_name)
        return ui_field is not None and ui_field.selection_type is SelectionType.MULTI_CHOICE

    # Dependencies --------------------------------------------------------

    def check_dependencies(
        self, specification_id: str, selected: Iterable[str]
    ) -> DependencyCheck:
        node = self.require_specification(specification_id)
        selected_ids = set(selected)
        missing: dict[str, tuple[str, ...]] = {}
        for category, options in node.requires.items():
            if not any(option in selected_ids for option in options):
                missing[category] = tuple(options)
        return DependencyCheck(
            specification_id=specification_id,
            satisfied=not missing,
            missing_by_category=missing,
        )

    def dependency_message(self, specification_id: str) -> str:
        """Human-readable requirement summary, e.g. ``"power: PSU A OR PSU B"``."""

        node = self.require_specification(specification_id)
        parts = [
            f"{category}: {' OR '.join(self.node_name(option) for option in options)}"
            for category, options in node.requires.items()
        ]
        return ", ".join(parts)
