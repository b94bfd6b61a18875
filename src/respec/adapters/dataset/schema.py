"""Pydantic models describing the specification dataset JSON file."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import ClassVar, Literal, TypeAlias, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

log = logging.getLogger(__name__)

RequiresPayload: TypeAlias = dict[str, list[str]]


class DatasetBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Dataset %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


def _keyed_collection(value: object) -> object:
    """Accept either ``{id: item}`` or ``[item, ...]``; fill missing ids from keys."""

    if isinstance(value, Mapping):
        items: list[object] = []
        for key, item in cast(Mapping[str, object], value).items():
            if isinstance(item, Mapping):
                data = dict(cast(Mapping[str, object], item))
                data.setdefault("id", key)
                items.append(data)
            else:
                items.append(item)
        return items
    return value


class SpecificationPayload(DatasetBaseModel):
    id: str
    name: str
    type: Literal["specification"] = "specification"
    field_name: str | None = None
    requires: RequiresPayload = Field(default_factory=dict)
    selected_value: str | None = None
    description: str | None = None
    technical_details: dict[str, object] | None = None
    parent_requirements: list[str] = Field(default_factory=list)

    @field_validator("field_name", "selected_value", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    @field_validator("requires", mode="before")
    @classmethod
    def _drop_null_requires(cls, value: object) -> object:
        return {} if value is None else value


class ExclusionPayload(DatasetBaseModel):
    id: str
    nodes: tuple[str, str]
    type: str
    reason: str = ""
    category: str | None = None
    resolution_priority: int = Field(default=1, ge=1)
    question_template: str | None = None

    @model_validator(mode="after")
    def _distinct_nodes(self) -> ExclusionPayload:
        if self.nodes[0] == self.nodes[1]:
            raise ValueError(f"Exclusion {self.id} must reference two distinct nodes")
        return self


class UiFieldPayload(DatasetBaseModel):
    field_name: str
    section: str | None = None
    category: str | None = None
    ui_type: Literal["dropdown", "multi_select"] = "dropdown"
    selection_type: Literal["single_choice", "multi_choice"] = "single_choice"
    options: list[str] = Field(default_factory=list)


class DatasetMetadata(DatasetBaseModel):
    schema_version: str | None = None
    dataset_version: str | None = None
    description: str | None = None


class DatasetDocument(DatasetBaseModel):
    metadata: DatasetMetadata = Field(default_factory=DatasetMetadata)
    specifications: list[SpecificationPayload] = Field(default_factory=list)
    exclusions: list[ExclusionPayload] = Field(default_factory=list)
    ui_fields: list[UiFieldPayload] = Field(default_factory=list)
    # Sections consumed by the upstream extraction layer, not by the engine.
    scenarios: object | None = None
    requirements: object | None = None
    comments: object | None = None

    _normalize_specifications = field_validator("specifications", mode="before")(
        _keyed_collection
    )
    _normalize_exclusions = field_validator("exclusions", mode="before")(_keyed_collection)

    @field_validator("ui_fields", mode="before")
    @classmethod
    def _normalize_ui_fields(cls, value: object) -> object:
        if isinstance(value, Mapping):
            items: list[object] = []
            for key, item in cast(Mapping[str, object], value).items():
                if isinstance(item, Mapping):
                    data = dict(cast(Mapping[str, object], item))
                    data.setdefault("field_name", key)
                    items.append(data)
                else:
                    items.append(item)
            return items
        return value
