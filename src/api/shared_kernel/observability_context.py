"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures caller-scoped metadata that should be included with all
    instrumentation events, so that every log line emitted while converging
    one declared resource can be correlated. Probe methods already log the
    project id, organization id and operation they are called with, so
    those never go in the context.

    Attributes:
        request_id: Unique identifier for the current lifecycle call.
        resource_address: Address of the declared resource being converged.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(
            request_id="req-123",
            resource_address="atlas_project.analytics",
        )
        probe = DefaultProjectServiceProbe().with_context(context)
    """

    request_id: str | None = None
    resource_address: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.resource_address is not None:
            result["resource_address"] = self.resource_address
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            resource_address=self.resource_address,
            extra={**self.extra, **kwargs},
        )
