"""Resolution planning: turn a chosen option into winners, losers and removals.

Planning is read-only. The artifact manager executes the removals and owns
rollback; keeping the plan explicit means a failed verification can always be
compared against what was intended.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from respec.domain.errors import StaleResolutionError
from respec.domain.model import Attribution

if TYPE_CHECKING:
    from collections.abc import Iterable

    from respec.domain.model import Conflict, LocatedSpecification, ResolutionOption

log = logging.getLogger(__name__)


class SpecificationLocator(Protocol):
    """Read access to the buckets needed while planning."""

    def find_specification_with_location(
        self, specification_id: str
    ) -> LocatedSpecification | None: ...

    def located_specifications(self) -> Iterable[LocatedSpecification]: ...


@dataclass(slots=True, kw_only=True)
class ResolutionPlan:
    """Aggregate plan for resolving one conflict."""

    winning_specs: list[LocatedSpecification] = field(
        default_factory=list["LocatedSpecification"]
    )
    losing_specs: list[LocatedSpecification] = field(
        default_factory=list["LocatedSpecification"]
    )
    removals: list[LocatedSpecification] = field(default_factory=list["LocatedSpecification"])

    @property
    def winner_ids(self) -> tuple[str, ...]:
        return tuple(located.specification.id for located in self.winning_specs)

    @property
    def loser_ids(self) -> tuple[str, ...]:
        return tuple(located.specification.id for located in self.losing_specs)

    @property
    def removal_ids(self) -> tuple[str, ...]:
        return tuple(located.specification.id for located in self.removals)


def plan_resolution(
    conflict: Conflict,
    option: ResolutionOption,
    locator: SpecificationLocator,
) -> ResolutionPlan:
    """Plan removals for ``option`` without touching any bucket.

    Every target must be present in a bucket, otherwise the conflict is stale and
    :class:`StaleResolutionError` is raised. Losers that are already gone are
    skipped. Each loser takes with it every assumption record whose
    ``dependency_of`` chain leads back to it, including targets that only exist
    to satisfy a loser. Every other target wins and is never removed.
    """

    plan = ResolutionPlan()
    targets = set(option.target_nodes)
    losers = list(
        dict.fromkeys(node_id for node_id in conflict.affected_nodes if node_id not in targets)
    )
    winners: set[str] = set()
    for winner_id in option.target_nodes:
        located = locator.find_specification_with_location(winner_id)
        if located is None:
            raise StaleResolutionError(winner_id)
        if _depends_on_any(located, set(losers), locator):
            log.info("Target %s was auto-added for a losing specification; dropping it", winner_id)
            continue
        winners.add(winner_id)
        plan.winning_specs.append(located)

    planned: set[str] = set()
    for loser_id in losers:
        located = locator.find_specification_with_location(loser_id)
        if located is None:
            log.warning("Losing specification %s already absent; skipping", loser_id)
            continue
        plan.losing_specs.append(located)
        if loser_id not in planned:
            planned.add(loser_id)
            plan.removals.append(located)
        for dependent in _assumption_dependents(loser_id, locator, skip=winners | planned):
            planned.add(dependent.specification.id)
            plan.removals.append(dependent)

    log.debug(
        "Planned resolution %s for conflict %s: winners=%s removals=%s",
        option.id,
        conflict.id,
        plan.winner_ids,
        plan.removal_ids,
    )
    return plan


def _assumption_dependents(
    root_id: str,
    locator: SpecificationLocator,
    *,
    skip: set[str],
) -> list[LocatedSpecification]:
    """Breadth-first walk of assumption records hanging off ``root_id``."""

    records = list(locator.located_specifications())
    collected: list[LocatedSpecification] = []
    seen = set(skip)
    queue = deque([root_id])
    while queue:
        parent_id = queue.popleft()
        for located in records:
            record = located.specification
            if record.id in seen:
                continue
            if record.attribution is not Attribution.ASSUMPTION:
                continue
            if record.dependency_of != parent_id:
                continue
            seen.add(record.id)
            collected.append(located)
            queue.append(record.id)
    return collected


def _depends_on_any(
    located: LocatedSpecification,
    node_ids: set[str],
    locator: SpecificationLocator,
) -> bool:
    """Whether an assumption record's ``dependency_of`` chain reaches ``node_ids``."""

    seen: set[str] = set()
    record = located.specification
    while record.attribution is Attribution.ASSUMPTION and record.dependency_of is not None:
        parent_id = record.dependency_of
        if parent_id in node_ids:
            return True
        if parent_id in seen:
            return False
        seen.add(parent_id)
        parent = locator.find_specification_with_location(parent_id)
        if parent is None:
            return False
        record = parent.specification
    return False
