"""Protocol for Atlas HTTP client observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AtlasClientProbe(Protocol):
    """Domain probe for remote API calls."""

    def request_completed(self, method: str, path: str, status_code: int) -> None:
        """Record a successful API call."""
        ...

    def request_failed(
        self,
        method: str,
        path: str,
        reason: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        """Record a failed API call."""
        ...

    def with_context(self, context: ObservationContext) -> AtlasClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAtlasClientProbe:
    """Default implementation of AtlasClientProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAtlasClientProbe:
        return DefaultAtlasClientProbe(logger=self._logger, context=context)

    def request_completed(self, method: str, path: str, status_code: int) -> None:
        self._logger.debug(
            "atlas_request_completed",
            method=method,
            path=path,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def request_failed(
        self,
        method: str,
        path: str,
        reason: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        self._logger.warning(
            "atlas_request_failed",
            method=method,
            path=path,
            reason=reason,
            status_code=status_code,
            error_code=error_code,
            **self._get_context_kwargs(),
        )
