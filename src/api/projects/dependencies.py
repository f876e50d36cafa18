"""Composition of the projects bounded context.

Builds the Atlas client, the dependents drainer and the project service
from application settings.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from infrastructure.logging import configure_logging
from infrastructure.settings import (
    AtlasSettings,
    DrainSettings,
    get_atlas_settings,
    get_drain_settings,
    get_settings,
)
from projects.application.dependents_drainer import DependentsDrainer
from projects.application.observability import (
    DefaultDependentsDrainProbe,
    DefaultProjectServiceProbe,
)
from projects.application.services import ProjectService
from projects.infrastructure.atlas_client import AtlasClient
from projects.infrastructure.observability import DefaultAtlasClientProbe
from shared_kernel.observability_context import ObservationContext


def build_atlas_client(
    settings: AtlasSettings | None = None,
    context: ObservationContext | None = None,
) -> AtlasClient:
    """Create an Atlas client from settings.

    The caller owns the client and must close it.
    """
    settings = settings or get_atlas_settings()
    probe = DefaultAtlasClientProbe()
    return AtlasClient(
        base_url=settings.base_url,
        public_key=settings.public_key,
        private_key=settings.private_key.get_secret_value(),
        timeout_seconds=settings.request_timeout_seconds,
        items_per_page=settings.items_per_page,
        probe=probe.with_context(context) if context else probe,
    )


def build_project_service(
    client: AtlasClient,
    drain_settings: DrainSettings | None = None,
    context: ObservationContext | None = None,
) -> ProjectService:
    """Wire a ProjectService around an existing client."""
    drain_settings = drain_settings or get_drain_settings()
    drain_probe = DefaultDependentsDrainProbe()
    service_probe = DefaultProjectServiceProbe()
    if context is not None:
        drain_probe = drain_probe.with_context(context)
        service_probe = service_probe.with_context(context)

    drainer = DependentsDrainer(
        api=client,
        poll_interval_seconds=drain_settings.poll_interval_seconds,
        timeout_seconds=drain_settings.timeout_seconds,
        max_consecutive_retries=drain_settings.max_consecutive_retries,
        probe=drain_probe,
    )
    return ProjectService(api=client, drainer=drainer, probe=service_probe)


@asynccontextmanager
async def project_service(
    context: ObservationContext | None = None,
) -> AsyncIterator[ProjectService]:
    """Yield a ProjectService whose HTTP client is closed on exit.

    This is the entry point for callers that drive the lifecycle, so it also
    configures logging from application settings.
    """
    configure_logging(debug=get_settings().debug)
    async with build_atlas_client(context=context) as client:
        yield build_project_service(client, context=context)
