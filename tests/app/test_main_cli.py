from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from respec import main as main_module
from tests.helpers.datasets import write_dataset_json

if TYPE_CHECKING:
    from pathlib import Path


def test_main_cli_lists_fields(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    dataset_path = write_dataset_json(tmp_path)

    main_module.main(["--dataset", str(dataset_path), "fields"])

    assert capsys.readouterr().out.splitlines() == [
        "processor: Core i5, Core i9",
        "cooling: Air cooler, Liquid cooler",
        "form_factor: Mini case, Tower case",
    ]


def test_main_cli_reads_dataset_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("RESPEC_DATASET_PATH", str(write_dataset_json(tmp_path)))

    main_module.main(["check", "--select", "CPU_I9"])

    out = capsys.readouterr().out.splitlines()
    assert "processor: Core i9" in out
    assert "cooling: Liquid cooler (assumed)" in out
    assert "form_factor: -" in out


def test_main_cli_reports_open_conflict(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    dataset_path = write_dataset_json(tmp_path)

    main_module.main(
        [
            "--dataset",
            str(dataset_path),
            "check",
            "--select",
            "CASE_MINI",
            "--select",
            "COOL_LIQUID",
        ]
    )

    out = capsys.readouterr().out
    assert "I detected a conflict: Liquid cooling does not fit a mini case" in out
    assert "A) Mini case" in out
    assert "B) Liquid cooling" in out
    assert "form_factor: -" in out


def test_main_cli_answers_conflict(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    dataset_path = write_dataset_json(tmp_path)

    main_module.main(
        [
            "--dataset",
            str(dataset_path),
            "check",
            "--select",
            "CASE_MINI",
            "--select",
            "COOL_LIQUID",
            "--choose",
            "A",
        ]
    )

    out = capsys.readouterr().out.splitlines()
    assert "form_factor: Mini case" in out
    assert "cooling: -" in out


def test_main_cli_without_dataset_exits_with_usage_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["fields"])

    assert excinfo.value.code == 2
    assert "RESPEC_DATASET_PATH" in capsys.readouterr().err


def test_main_cli_unreadable_dataset_exits_with_failure(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--dataset", str(tmp_path / "missing.json"), "fields"])

    assert excinfo.value.code == 1
    assert "Could not load dataset" in capsys.readouterr().err


def test_main_cli_unknown_specification_exits_with_failure(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    dataset_path = write_dataset_json(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--dataset", str(dataset_path), "check", "--select", "NOPE"])

    assert excinfo.value.code == 1
    assert "NOPE" in capsys.readouterr().err


def test_console_entry_loads_dotenv_before_running(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr(main_module, "load_dotenv", lambda: calls.append("dotenv"))
    monkeypatch.setattr(main_module, "signal", lambda *_: calls.append("signal"))
    monkeypatch.setattr(main_module, "main", lambda: calls.append("main"))

    main_module.run()

    assert calls == ["dotenv", "signal", "main"]
