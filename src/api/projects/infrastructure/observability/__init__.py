"""Domain probes for projects infrastructure adapters."""

from projects.infrastructure.observability.atlas_client_probe import (
    AtlasClientProbe,
    DefaultAtlasClientProbe,
)

__all__ = ["AtlasClientProbe", "DefaultAtlasClientProbe"]
