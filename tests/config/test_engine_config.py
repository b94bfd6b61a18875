from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from respec.config import (
    DEFAULT_DEPENDENCY_DEPTH_LIMIT,
    DEFAULT_ESCALATION_THRESHOLD,
    ConfigurationError,
    MissingConfigurationError,
    get_engine_config,
    positive_int_env,
    require_env_vars,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_defaults_without_environment() -> None:
    config = get_engine_config()

    assert config.dataset_path is None
    assert config.resolve_dataset_path() is None
    assert config.dependency_depth_limit == DEFAULT_DEPENDENCY_DEPTH_LIMIT
    assert config.escalation_threshold == DEFAULT_ESCALATION_THRESHOLD


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("RESPEC_DATASET_PATH", str(tmp_path / "dataset.json"))
    monkeypatch.setenv("RESPEC_DEPENDENCY_DEPTH_LIMIT", "4")
    monkeypatch.setenv("RESPEC_ESCALATION_THRESHOLD", " 5 ")

    config = get_engine_config()

    assert config.resolve_dataset_path() == (tmp_path / "dataset.json").resolve()
    assert config.dependency_depth_limit == 4
    assert config.escalation_threshold == 5


def test_required_dataset_path_missing() -> None:
    with pytest.raises(MissingConfigurationError) as exc:
        get_engine_config(require_dataset=True)

    assert "RESPEC_DATASET_PATH" in str(exc.value)


def test_require_env_vars_rejects_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RESPEC_DATASET_PATH", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_vars(["RESPEC_DATASET_PATH"])


@pytest.mark.parametrize("raw", ["zero", "0", "-3"])
def test_positive_int_env_rejects_invalid(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("RESPEC_ESCALATION_THRESHOLD", raw)

    with pytest.raises(ConfigurationError, match="RESPEC_ESCALATION_THRESHOLD"):
        positive_int_env("RESPEC_ESCALATION_THRESHOLD", 3)


def test_missing_configuration_lists_every_name() -> None:
    with pytest.raises(ConfigurationError) as exc:
        require_env_vars(["RESPEC_ESCALATION_THRESHOLD", "RESPEC_DATASET_PATH"])

    assert isinstance(exc.value, MissingConfigurationError)
    assert exc.value.names == ("RESPEC_DATASET_PATH", "RESPEC_ESCALATION_THRESHOLD")
    assert str(exc.value) == (
        "Missing configuration for: RESPEC_DATASET_PATH, RESPEC_ESCALATION_THRESHOLD"
    )
