from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from respec.adapters.dataset import DatasetLoadError, load_dataset, parse_dataset
from respec.domain.model import ExclusionType, SelectionType
from tests.helpers.datasets import WORKSTATION_PAYLOAD, write_dataset_json

if TYPE_CHECKING:
    from pathlib import Path


def test_load_keyed_dataset(tmp_path: Path) -> None:
    dataset = load_dataset(write_dataset_json(tmp_path))

    assert set(dataset.specifications) == {
        "CPU_I5",
        "CPU_I9",
        "COOL_AIR",
        "COOL_LIQUID",
        "CASE_MINI",
        "CASE_TOWER",
    }
    cpu = dataset.specifications["CPU_I9"]
    assert cpu.name == "Core i9"
    assert cpu.field_name == "processor"
    assert cpu.requires == {"cooling": ("COOL_LIQUID",)}
    (exclusion,) = dataset.exclusions
    assert exclusion.id == "EX_MINI_LIQUID"
    assert exclusion.nodes == ("CASE_MINI", "COOL_LIQUID")
    assert exclusion.type is ExclusionType.HARD_INCOMPATIBLE
    assert exclusion.category == "spec_spec"
    assert exclusion.question_template == "Choose between Mini case or Liquid cooling?"
    assert [ui_field.field_name for ui_field in dataset.ui_fields] == [
        "processor",
        "cooling",
        "form_factor",
    ]
    assert dataset.ui_fields[0].category == "cpu"
    assert dataset.ui_fields[1].selection_type is SelectionType.SINGLE_CHOICE
    assert dataset.metadata == {"schema_version": "8.0", "dataset_version": "test"}


def test_parse_list_form_and_blank_fields() -> None:
    raw = json.dumps(
        {
            "specifications": [
                {"id": "A", "name": "Alpha", "field_name": "  ", "requires": None},
                {"id": "B", "name": "Beta", "selected_value": "", "requires": {"x": ["A", ""]}},
            ],
            "exclusions": [],
        }
    )

    dataset = parse_dataset(raw)

    assert dataset.specifications["A"].field_name is None
    assert dataset.specifications["A"].requires == {}
    assert dataset.specifications["B"].selected_value is None
    assert dataset.specifications["B"].requires == {"x": ("A",)}
    assert dataset.ui_fields == ()


def test_duplicate_specification_keeps_first(caplog: pytest.LogCaptureFixture) -> None:
    raw = json.dumps(
        {
            "specifications": [
                {"id": "A", "name": "First"},
                {"id": "A", "name": "Second"},
            ]
        }
    )

    with caplog.at_level("WARNING"):
        dataset = parse_dataset(raw)

    assert dataset.specifications["A"].name == "First"
    assert "Duplicate specification id A" in caplog.text


def test_unknown_exclusion_type_is_kept_raw(caplog: pytest.LogCaptureFixture) -> None:
    raw = json.dumps(
        {
            "specifications": {"A": {"name": "A"}, "B": {"name": "B"}},
            "exclusions": {"E": {"nodes": ["A", "B"], "type": "soft_preference"}},
        }
    )

    with caplog.at_level("WARNING"):
        dataset = parse_dataset(raw)

    assert dataset.exclusions[0].type == "soft_preference"
    assert "soft_preference" in caplog.text


def test_unmodeled_keys_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    raw = json.dumps({"specifications": {"A": {"name": "A", "vendor_sku_hint": "X-1"}}})

    with caplog.at_level("WARNING"):
        parse_dataset(raw)

    assert "vendor_sku_hint" in caplog.text


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    missing = tmp_path / "nope.json"

    with pytest.raises(DatasetLoadError) as excinfo:
        load_dataset(missing)

    assert excinfo.value.path == missing


def test_self_exclusion_fails_validation(tmp_path: Path) -> None:
    payload = {
        "specifications": {"A": {"name": "A"}},
        "exclusions": {"E": {"nodes": ["A", "A"], "type": "hard_incompatible"}},
    }

    with pytest.raises(DatasetLoadError, match="validation error"):
        load_dataset(write_dataset_json(tmp_path, payload))


def test_invalid_priority_fails_validation(tmp_path: Path) -> None:
    payload = dict(WORKSTATION_PAYLOAD)
    payload["exclusions"] = {
        "E": {
            "nodes": ["CPU_I5", "CASE_MINI"],
            "type": "hard_incompatible",
            "resolution_priority": 0,
        }
    }

    with pytest.raises(DatasetLoadError):
        load_dataset(write_dataset_json(tmp_path, payload))
