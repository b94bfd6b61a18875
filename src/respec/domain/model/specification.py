"""Immutable dataset objects: specification nodes, exclusions and UI fields."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from .enums import ExclusionType, SelectionType

NodeId: TypeAlias = str
RequiresMap: TypeAlias = Mapping[str, tuple[NodeId, ...]]


@dataclass(frozen=True, slots=True, kw_only=True)
class SpecificationNode:
    """One selectable option in the dataset graph.

    ``requires`` maps a dependency category to the node ids that can satisfy it.
    Any one id satisfies its category; every category must be satisfied.
    """

    id: NodeId
    name: str
    field_name: str | None = None
    requires: RequiresMap = field(default_factory=dict["str", "tuple[NodeId, ...]"])
    selected_value: str | None = None
    description: str | None = None
    technical_details: Mapping[str, object] | None = None

    @property
    def required_ids(self) -> tuple[NodeId, ...]:
        seen: dict[NodeId, None] = {}
        for node_ids in self.requires.values():
            for node_id in node_ids:
                seen.setdefault(node_id, None)
        return tuple(seen)


@dataclass(frozen=True, slots=True, kw_only=True)
class Exclusion:
    """Declared pairwise incompatibility between two nodes."""

    id: str
    nodes: tuple[NodeId, NodeId]
    type: ExclusionType | str
    reason: str
    resolution_priority: int = 1
    question_template: str | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if len(self.nodes) != 2 or self.nodes[0] == self.nodes[1]:  # noqa: PLR2004
            raise ValueError(f"Exclusion {self.id} must reference two distinct nodes")

    def involves(self, node_id: NodeId) -> bool:
        return node_id in self.nodes

    def other(self, node_id: NodeId) -> NodeId:
        first, second = self.nodes
        if node_id == first:
            return second
        if node_id == second:
            return first
        raise ValueError(f"Exclusion {self.id} does not involve {node_id}")


@dataclass(frozen=True, slots=True, kw_only=True)
class UiField:
    field_name: str
    section: str | None = None
    category: str | None = None
    ui_type: str = "dropdown"
    selection_type: SelectionType = SelectionType.SINGLE_CHOICE
    options: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class SpecificationDataset:
    """Externally supplied dataset consumed by the graph accessor."""

    specifications: Mapping[NodeId, SpecificationNode]
    exclusions: tuple[Exclusion, ...] = ()
    ui_fields: tuple[UiField, ...] = ()
    metadata: Mapping[str, object] = field(default_factory=dict["str", "object"])
