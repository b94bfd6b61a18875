from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from respec.domain.errors import StaleResolutionError
from respec.domain.model import (
    OPTION_A,
    Attribution,
    Bucket,
    ExclusionConflict,
    LocatedSpecification,
    ResolutionAction,
    ResolutionOption,
    SelectedSpecification,
)
from respec.domain.resolution import plan_resolution

if TYPE_CHECKING:
    from collections.abc import Iterable


class FakeLocator:
    def __init__(self, *records: tuple[Bucket, SelectedSpecification]) -> None:
        self.records = {record.id: (bucket, record) for bucket, record in records}

    def find_specification_with_location(
        self, specification_id: str
    ) -> LocatedSpecification | None:
        entry = self.records.get(specification_id)
        if entry is None:
            return None
        bucket, record = entry
        return LocatedSpecification(bucket=bucket, specification=record)

    def located_specifications(self) -> Iterable[LocatedSpecification]:
        return [
            LocatedSpecification(bucket=bucket, specification=record)
            for bucket, record in self.records.values()
        ]


def _record(
    spec_id: str, *, dependency_of: str | None = None, assumption: bool = False
) -> SelectedSpecification:
    return SelectedSpecification(
        id=spec_id,
        name=spec_id,
        value=spec_id,
        field_name=None,
        attribution=Attribution.ASSUMPTION if assumption else Attribution.REQUIREMENT,
        dependency_of=dependency_of,
    )


def _conflict() -> ExclusionConflict:
    return ExclusionConflict(
        proposed_value="B",
        existing_value="A",
        exclusion_id="E1",
        description="A and B clash",
        affected_nodes=("B", "A"),
    )


def _keep_a() -> ResolutionOption:
    return ResolutionOption(
        id=OPTION_A,
        description="Keep A",
        action=ResolutionAction.KEEP_EXISTING,
        target_nodes=("A",),
        expected_outcome="A remains selected",
    )


def test_plan_removes_losers_and_their_assumption_chain() -> None:
    locator = FakeLocator(
        (Bucket.SETTLED, _record("A")),
        (Bucket.PENDING, _record("B")),
        (Bucket.PENDING, _record("B_DEP", dependency_of="B", assumption=True)),
        (Bucket.PENDING, _record("B_DEP_DEP", dependency_of="B_DEP", assumption=True)),
        (Bucket.PENDING, _record("B_USER", dependency_of="B")),
    )

    plan = plan_resolution(_conflict(), _keep_a(), locator)

    assert plan.winner_ids == ("A",)
    assert plan.loser_ids == ("B",)
    assert plan.removal_ids == ("B", "B_DEP", "B_DEP_DEP")
    assert plan.winning_specs[0].bucket is Bucket.SETTLED


def test_plan_never_removes_winners_reached_through_dependencies() -> None:
    locator = FakeLocator(
        (Bucket.SETTLED, _record("A")),
        (Bucket.PENDING, _record("B")),
        (Bucket.PENDING, _record("SHARED", dependency_of="A", assumption=True)),
    )
    option = ResolutionOption(
        id=OPTION_A,
        description="Keep A",
        action=ResolutionAction.KEEP_EXISTING,
        target_nodes=("A", "SHARED"),
        expected_outcome="A remains selected",
    )

    plan = plan_resolution(_conflict(), option, locator)

    assert plan.winner_ids == ("A", "SHARED")
    assert plan.removal_ids == ("B",)


def test_plan_drops_targets_auto_added_for_a_loser() -> None:
    locator = FakeLocator(
        (Bucket.SETTLED, _record("A")),
        (Bucket.PENDING, _record("B")),
        (Bucket.PENDING, _record("B_DEP", dependency_of="B", assumption=True)),
        (Bucket.PENDING, _record("B_DEP_DEP", dependency_of="B_DEP", assumption=True)),
    )
    option = ResolutionOption(
        id=OPTION_A,
        description="Keep existing selections",
        action=ResolutionAction.KEEP_EXISTING,
        target_nodes=("A", "B_DEP_DEP"),
        expected_outcome="B and its requirements will be dropped",
    )

    plan = plan_resolution(_conflict(), option, locator)

    assert plan.winner_ids == ("A",)
    assert plan.loser_ids == ("B",)
    assert plan.removal_ids == ("B", "B_DEP", "B_DEP_DEP")


def test_plan_fails_when_winner_is_missing() -> None:
    locator = FakeLocator((Bucket.PENDING, _record("B")))

    with pytest.raises(StaleResolutionError) as excinfo:
        plan_resolution(_conflict(), _keep_a(), locator)

    assert excinfo.value.node_id == "A"


def test_plan_skips_losers_that_are_already_gone(caplog: pytest.LogCaptureFixture) -> None:
    locator = FakeLocator((Bucket.PENDING, _record("A")))

    with caplog.at_level("WARNING"):
        plan = plan_resolution(_conflict(), _keep_a(), locator)

    assert plan.removals == []
    assert plan.losing_specs == []
    assert "already absent" in caplog.text
