"""Per-field form updates derived from the settled bucket."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from respec.domain.model import FormUpdate

if TYPE_CHECKING:
    from collections.abc import Mapping

    from respec.domain.graph import SpecificationGraph
    from respec.domain.model import SelectedSpecification

log = logging.getLogger(__name__)

CLEARED_NOTE = "Cleared because no specification is selected"


def _resolved_value(graph: SpecificationGraph, record: SelectedSpecification) -> object:
    node = graph.get_specification(record.id)
    if node is not None and node.selected_value:
        return node.selected_value
    if record.value not in (None, ""):
        return record.value
    return node.name if node is not None else record.name


def generate_form_updates(
    graph: SpecificationGraph, settled: Mapping[str, SelectedSpecification]
) -> list[FormUpdate]:
    """One update per known field: the highest-confidence settled record, or a clear."""

    by_field: dict[str, SelectedSpecification] = {}
    for record in settled.values():
        field_name = record.field_name or graph.get_field_for_specification(record.id)
        if not field_name:
            continue
        current = by_field.get(field_name)
        if current is None or record.confidence > current.confidence:
            by_field[field_name] = record

    updates: list[FormUpdate] = []
    for field_name in graph.known_fields():
        ui_field = graph.get_ui_field(field_name)
        section = ui_field.section if ui_field is not None else None
        record = by_field.get(field_name)
        if record is None:
            updates.append(
                FormUpdate(
                    field_name=field_name,
                    value=None,
                    section=section,
                    substitution_note=CLEARED_NOTE,
                )
            )
            continue
        updates.append(
            FormUpdate(
                field_name=field_name,
                value=_resolved_value(graph, record),
                section=section,
                confidence=record.confidence,
                is_assumption=record.is_assumption,
                original_request=record.original_request,
                substitution_note=record.substitution_note,
            )
        )

    log.debug("Generated %d form update(s)", len(updates))
    return updates
