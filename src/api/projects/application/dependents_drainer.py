"""Polling loop waiting for a project's dependents to finish deleting.

Clusters that are being torn down still block project deletion. Before
deleting a project the driver polls the cluster listing, feeding each fetch
outcome to the drain state machine, until the aggregate becomes idle.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from projects.application.observability import (
    DefaultDependentsDrainProbe,
    DependentsDrainProbe,
)
from projects.domain.drain import DrainState, DrainTick, next_drain_state
from projects.domain.value_objects import DependentResourceSet, ProjectId
from projects.ports.exceptions import (
    DrainRetriesExhaustedError,
    DrainTimeoutError,
    TransientNetworkError,
)
from projects.ports.remote import IAtlasProjectsAPI


class DependentsDrainer:
    """Waits until no dependent of a project is in a deleting state.

    The first tick runs immediately; later ticks are spaced by a fixed
    interval. The whole wait is bounded by a timeout, and by a maximum
    number of consecutive ticks that could not obtain a listing.
    """

    def __init__(
        self,
        api: IAtlasProjectsAPI,
        poll_interval_seconds: float = 30.0,
        timeout_seconds: float = 1800.0,
        max_consecutive_retries: int = 20,
        probe: DependentsDrainProbe | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the drainer.

        Args:
            api: Remote API used to list dependents
            poll_interval_seconds: Minimum delay between two ticks
            timeout_seconds: Upper bound on the whole wait
            max_consecutive_retries: RETRY ticks tolerated in a row
            probe: Optional domain probe for observability
            sleep: Coroutine used to wait between ticks
        """
        self._api = api
        self._poll_interval = poll_interval_seconds
        self._timeout = timeout_seconds
        self._max_consecutive_retries = max_consecutive_retries
        self._probe = probe or DefaultDependentsDrainProbe()
        self._sleep = sleep

    async def wait_until_idle(self, project_id: ProjectId) -> DrainTick:
        """Poll until the dependents of project_id are idle.

        Args:
            project_id: The project about to be deleted

        Returns:
            The IDLE tick that ended the wait

        Raises:
            AtlasAPIError: If listing dependents fails with an API error
            MalformedResponseError: If a listing cannot be interpreted
            DrainTimeoutError: If dependents are still deleting at the timeout
            DrainRetriesExhaustedError: If too many ticks in a row got no listing
        """
        self._probe.drain_started(
            project_id=project_id.value,
            timeout_seconds=self._timeout,
        )
        try:
            async with asyncio.timeout(self._timeout):
                return await self._poll(project_id)
        except TimeoutError as e:
            raise DrainTimeoutError(
                f"dependents of project({project_id.value}) still deleting "
                f"after {self._timeout}s"
            ) from e

    async def _poll(self, project_id: ProjectId) -> DrainTick:
        ticks = 0
        consecutive_retries = 0

        while True:
            ticks += 1
            tick = next_drain_state(await self._fetch(project_id))
            self._probe.drain_ticked(
                project_id=project_id.value,
                state=tick.state.value,
                dependent_count=(
                    tick.dependents.total_count if tick.dependents is not None else None
                ),
            )

            if tick.state is DrainState.IDLE:
                self._probe.drain_completed(project_id=project_id.value, ticks=ticks)
                return tick

            if tick.state is DrainState.RETRY:
                consecutive_retries += 1
                if consecutive_retries > self._max_consecutive_retries:
                    raise DrainRetriesExhaustedError(
                        f"could not list dependents of project({project_id.value}) "
                        f"{consecutive_retries} times in a row"
                    )
            else:
                consecutive_retries = 0

            await self._sleep(self._poll_interval)

    async def _fetch(self, project_id: ProjectId) -> DependentResourceSet | None:
        """List dependents, or return None after a transient failure.

        API errors are terminal for the wait and propagate.
        """
        try:
            return await self._api.list_dependents(project_id)
        except TransientNetworkError as e:
            self._probe.dependents_fetch_failed(
                project_id=project_id.value,
                error=str(e),
            )
            return None
