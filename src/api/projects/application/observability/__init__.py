"""Domain-Oriented Observability for the projects application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from projects.application.observability.dependents_drain_probe import (
    DefaultDependentsDrainProbe,
    DependentsDrainProbe,
)
from projects.application.observability.project_service_probe import (
    DefaultProjectServiceProbe,
    ProjectServiceProbe,
)

__all__ = [
    "ProjectServiceProbe",
    "DefaultProjectServiceProbe",
    "DependentsDrainProbe",
    "DefaultDependentsDrainProbe",
]
