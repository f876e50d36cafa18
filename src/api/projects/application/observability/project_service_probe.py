"""Protocol for project service observability.

Defines the interface for domain probes that capture application-level
domain events for project convergence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ProjectServiceProbe(Protocol):
    """Domain probe for project lifecycle operations."""

    def project_created(self, project_id: str, org_id: str, name: str) -> None:
        """Record that the remote project was created."""
        ...

    def operation_failed(
        self,
        operation: str,
        project_id: str | None,
        error: str,
    ) -> None:
        """Record that a lifecycle phase failed fatally."""
        ...

    def grants_reconciled(
        self,
        project_id: str,
        kind: str,
        added: int,
        changed: int,
        removed: int,
    ) -> None:
        """Record that a grant collection was converged."""
        ...

    def team_removal_denied(self, project_id: str, team_id: str, error: str) -> None:
        """Record that removing a team was not authorized and was skipped."""
        ...

    def api_keys_unreadable(self, project_id: str, error: str) -> None:
        """Record that API keys could not be read and are reported empty."""
        ...

    def settings_updated(self, project_id: str, fields: list[str]) -> None:
        """Record that settings were written."""
        ...

    def settings_unchanged(self, project_id: str) -> None:
        """Record that no settings write was needed."""
        ...

    def project_gone(self, project_id: str) -> None:
        """Record that a read found the project no longer exists."""
        ...

    def dependents_wait_abandoned(self, project_id: str, error: str) -> None:
        """Record that waiting on dependents failed and deletion proceeds."""
        ...

    def project_deleted(self, project_id: str) -> None:
        """Record that the project was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> ProjectServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultProjectServiceProbe:
    """Default implementation of ProjectServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultProjectServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultProjectServiceProbe(logger=self._logger, context=context)

    def project_created(self, project_id: str, org_id: str, name: str) -> None:
        self._logger.info(
            "project_created",
            project_id=project_id,
            org_id=org_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def operation_failed(
        self,
        operation: str,
        project_id: str | None,
        error: str,
    ) -> None:
        self._logger.error(
            "project_operation_failed",
            operation=operation,
            project_id=project_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def grants_reconciled(
        self,
        project_id: str,
        kind: str,
        added: int,
        changed: int,
        removed: int,
    ) -> None:
        self._logger.info(
            "project_grants_reconciled",
            project_id=project_id,
            kind=kind,
            added=added,
            changed=changed,
            removed=removed,
            **self._get_context_kwargs(),
        )

    def team_removal_denied(self, project_id: str, team_id: str, error: str) -> None:
        self._logger.warning(
            "project_team_removal_denied",
            project_id=project_id,
            team_id=team_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def api_keys_unreadable(self, project_id: str, error: str) -> None:
        # api_keys will be reported empty
        self._logger.warning(
            "project_api_keys_unreadable",
            project_id=project_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def settings_updated(self, project_id: str, fields: list[str]) -> None:
        self._logger.info(
            "project_settings_updated",
            project_id=project_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def settings_unchanged(self, project_id: str) -> None:
        self._logger.debug(
            "project_settings_unchanged",
            project_id=project_id,
            **self._get_context_kwargs(),
        )

    def project_gone(self, project_id: str) -> None:
        self._logger.warning(
            "project_not_found_on_read",
            project_id=project_id,
            **self._get_context_kwargs(),
        )

    def dependents_wait_abandoned(self, project_id: str, error: str) -> None:
        self._logger.error(
            "project_dependents_wait_abandoned",
            project_id=project_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def project_deleted(self, project_id: str) -> None:
        self._logger.info(
            "project_deleted",
            project_id=project_id,
            **self._get_context_kwargs(),
        )
