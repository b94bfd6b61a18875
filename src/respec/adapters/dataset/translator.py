"""Translate parsed dataset payloads into immutable domain objects."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from respec.domain.model import (
    Exclusion,
    ExclusionType,
    SelectionType,
    SpecificationDataset,
    SpecificationNode,
    UiField,
)

if TYPE_CHECKING:
    from .schema import DatasetDocument, ExclusionPayload, SpecificationPayload, UiFieldPayload

log = getLogger(__name__)


def translate_specification(payload: SpecificationPayload) -> SpecificationNode:
    return SpecificationNode(
        id=payload.id,
        name=payload.name,
        field_name=payload.field_name,
        requires={
            category: tuple(node_id for node_id in node_ids if node_id)
            for category, node_ids in payload.requires.items()
        },
        selected_value=payload.selected_value,
        description=payload.description,
        technical_details=payload.technical_details,
    )


def _exclusion_type(raw: str) -> ExclusionType | str:
    try:
        return ExclusionType(raw)
    except ValueError:
        log.warning("Unknown exclusion type %r; keeping raw value", raw)
        return raw


def translate_exclusion(payload: ExclusionPayload) -> Exclusion:
    return Exclusion(
        id=payload.id,
        nodes=payload.nodes,
        type=_exclusion_type(payload.type),
        reason=payload.reason,
        resolution_priority=payload.resolution_priority,
        question_template=payload.question_template or None,
        category=payload.category,
    )


def translate_ui_field(payload: UiFieldPayload) -> UiField:
    return UiField(
        field_name=payload.field_name,
        section=payload.section,
        category=payload.category,
        ui_type=payload.ui_type,
        selection_type=SelectionType(payload.selection_type),
        options=tuple(payload.options),
    )


def translate_dataset(document: DatasetDocument) -> SpecificationDataset:
    specifications: dict[str, SpecificationNode] = {}
    for payload in document.specifications:
        if payload.id in specifications:
            log.warning("Duplicate specification id %s; keeping the first", payload.id)
            continue
        specifications[payload.id] = translate_specification(payload)

    exclusions = tuple(translate_exclusion(payload) for payload in document.exclusions)
    for exclusion in exclusions:
        unknown = [node_id for node_id in exclusion.nodes if node_id not in specifications]
        if unknown:
            log.debug("Exclusion %s references unknown nodes %s", exclusion.id, unknown)

    return SpecificationDataset(
        specifications=specifications,
        exclusions=exclusions,
        ui_fields=tuple(translate_ui_field(payload) for payload in document.ui_fields),
        metadata=document.metadata.model_dump(exclude_none=True),
    )
