"""State machine deciding whether a project's dependents are still draining.

Invoked once per poll tick with the latest dependents listing. Fetch
failures, sleeping and timeouts belong to the polling loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from projects.domain.value_objects import DependentResourceSet


class DrainState(StrEnum):
    """Aggregate state of a project's dependents."""

    DELETING = "DELETING"
    RETRY = "RETRY"
    IDLE = "IDLE"

    @property
    def is_pending(self) -> bool:
        return self is not DrainState.IDLE


@dataclass(frozen=True)
class DrainTick:
    """Result of one transition.

    dependents is None when no listing was obtained this tick.
    """

    state: DrainState
    dependents: DependentResourceSet | None = None


def next_drain_state(outcome: DependentResourceSet | None) -> DrainTick:
    """Transition on the latest dependents listing.

    Any dependent that is not deleting makes the aggregate IDLE, even if
    others are still deleting. Mixed fleets can therefore under-wait.

    Args:
        outcome: The listing, or None when this tick could not obtain one

    Returns:
        The next DrainTick
    """
    if outcome is None:
        return DrainTick(state=DrainState.RETRY)

    if outcome.total_count == 0:
        return DrainTick(state=DrainState.IDLE, dependents=outcome)

    if any(not resource.is_deleting for resource in outcome.resources):
        return DrainTick(state=DrainState.IDLE, dependents=outcome)

    return DrainTick(state=DrainState.DELETING, dependents=outcome)
