"""Protocol for dependents drain observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class DependentsDrainProbe(Protocol):
    """Domain probe for the wait on a project's dependents."""

    def drain_started(self, project_id: str, timeout_seconds: float) -> None:
        """Record that waiting on dependents began."""
        ...

    def drain_ticked(
        self,
        project_id: str,
        state: str,
        dependent_count: int | None,
    ) -> None:
        """Record the state reached on one poll tick."""
        ...

    def dependents_fetch_failed(self, project_id: str, error: str) -> None:
        """Record a transient failure to list dependents."""
        ...

    def drain_completed(self, project_id: str, ticks: int) -> None:
        """Record that dependents reached the idle state."""
        ...

    def with_context(self, context: ObservationContext) -> DependentsDrainProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultDependentsDrainProbe:
    """Default implementation of DependentsDrainProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultDependentsDrainProbe:
        return DefaultDependentsDrainProbe(logger=self._logger, context=context)

    def drain_started(self, project_id: str, timeout_seconds: float) -> None:
        self._logger.debug(
            "project_dependents_drain_started",
            project_id=project_id,
            timeout_seconds=timeout_seconds,
            **self._get_context_kwargs(),
        )

    def drain_ticked(
        self,
        project_id: str,
        state: str,
        dependent_count: int | None,
    ) -> None:
        self._logger.debug(
            "project_dependents_status",
            project_id=project_id,
            state=state,
            dependent_count=dependent_count,
            **self._get_context_kwargs(),
        )

    def dependents_fetch_failed(self, project_id: str, error: str) -> None:
        self._logger.debug(
            "project_dependents_fetch_failed",
            project_id=project_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def drain_completed(self, project_id: str, ticks: int) -> None:
        self._logger.info(
            "project_dependents_drained",
            project_id=project_id,
            ticks=ticks,
            **self._get_context_kwargs(),
        )
