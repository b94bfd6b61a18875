from __future__ import annotations

from respec.domain.model import (
    CascadeConflict,
    ConflictType,
    ConstraintConflict,
    ExclusionConflict,
    OverwriteConflict,
)
from respec.domain.resolution import ConflictResolver, deduplicate_by_signature
from tests.helpers.datasets import (
    make_dataset,
    make_exclusion,
    make_graph,
    make_spec,
    workstation_dataset,
)


def _resolver() -> ConflictResolver:
    return ConflictResolver(make_graph(workstation_dataset()))


def test_overwrite_detected_when_field_already_selected() -> None:
    conflicts = _resolver().detect_all_conflicts_for_specification("CPU_I5", ["CASE_TOWER"])
    assert conflicts == []

    conflicts = _resolver().detect_all_conflicts_for_specification(
        "CASE_MINI", ["CASE_TOWER", "CASE_MINI"]
    )

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert isinstance(conflict, OverwriteConflict)
    assert conflict.existing_value == "CASE_TOWER"
    assert conflict.affected_nodes == ("CASE_TOWER", "CASE_MINI")
    assert conflict.signature == "field_overwrite:CASE_MINI|CASE_TOWER"
    assert conflict.description == 'Field "form_factor" already has a value'


def test_multi_choice_fields_never_overwrite() -> None:
    conflicts = _resolver().detect_all_conflicts_for_specification("HDD_4TB", ["SSD_1TB"])

    assert conflicts == []


def test_exclusion_conflict_carries_question_template() -> None:
    conflicts = _resolver().detect_all_conflicts_for_specification("COOL_LIQUID", ["CASE_MINI"])

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert isinstance(conflict, ExclusionConflict)
    assert conflict.affected_nodes == ("COOL_LIQUID", "CASE_MINI")
    assert conflict.exclusion_id == "EX_MINI_LIQUID"
    assert conflict.question_template == "Choose between Mini case or Liquid cooling?"
    assert conflict.description == "Liquid cooling does not fit a mini case"


def test_cascade_conflict_when_requirement_overwrites_selection() -> None:
    conflicts = _resolver().detect_all_conflicts_for_specification(
        "CPU_I9", ["COOL_AIR", "COOL_LIQUID", "PSU_850"]
    )

    assert [c.type for c in conflicts] == [ConflictType.CASCADE]
    conflict = conflicts[0]
    assert isinstance(conflict, CascadeConflict)
    assert conflict.affected_nodes == ("COOL_AIR", "COOL_LIQUID", "CPU_I9")
    assert conflict.required_node == "COOL_LIQUID"
    assert conflict.description.startswith("Required by Core i9: ")


def test_cascade_detection_terminates_on_cyclic_requirements() -> None:
    graph = make_graph(
        make_dataset(
            [
                make_spec("A", field="fa", requires={"needs": ["B"]}),
                make_spec("B", field="fb", requires={"needs": ["A"]}),
                make_spec("B_OLD", field="fb"),
            ]
        )
    )

    conflicts = ConflictResolver(graph).detect_all_conflicts_for_specification("A", ["B_OLD"])

    assert [c.type for c in conflicts] == [ConflictType.CASCADE]
    assert conflicts[0].affected_nodes == ("B_OLD", "B", "A")


def test_constraint_conflict_covers_whole_selection() -> None:
    graph = make_graph(
        make_dataset(
            [
                make_spec("P20", field="F"),
                make_spec("P21", field="F"),
                make_spec("X", field="G"),
                make_spec("Y", field="H"),
            ],
            [make_exclusion("E20", "X", "P20"), make_exclusion("E21", "X", "P21")],
        )
    )

    conflicts = ConflictResolver(graph).detect_all_conflicts_for_specification("P21", ["X", "Y"])

    constraint = [c for c in conflicts if isinstance(c, ConstraintConflict)]
    assert len(constraint) == 1
    assert constraint[0].affected_nodes == ("X", "Y", "P21")
    assert constraint[0].field_name == "F"
    assert constraint[0].description == 'Adding P21 would leave field "F" with no valid options'
    assert {c.type for c in conflicts} == {ConflictType.EXCLUSION, ConflictType.FIELD_CONSTRAINT}


def test_every_detected_conflict_has_two_options() -> None:
    conflicts = _resolver().detect_all_conflicts_for_specification(
        "CPU_I9", ["COOL_AIR", "COOL_LIQUID", "CASE_MINI"]
    )

    assert conflicts
    assert all(len(c.resolution_options) == 2 for c in conflicts)
    assert all(
        [option.id for option in c.resolution_options] == ["option-a", "option-b"]
        for c in conflicts
    )


def test_deduplicate_keeps_first_conflict_per_signature() -> None:
    first = OverwriteConflict(
        proposed_value="B",
        existing_value="A",
        field_name="f",
        description="first",
        affected_nodes=("A", "B"),
    )
    second = OverwriteConflict(
        proposed_value="A",
        existing_value="B",
        field_name="f",
        description="second",
        affected_nodes=("B", "A"),
    )

    assert deduplicate_by_signature([first, second]) == [first]
