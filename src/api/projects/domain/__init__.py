"""Domain layer for the projects bounded context.

Pure business logic: value objects, the project entity, grant diffing and
the dependents drain state machine. No I/O.
"""

from projects.domain.drain import DrainState, DrainTick, next_drain_state
from projects.domain.grant_diff import diff_grants
from projects.domain.project import Project
from projects.domain.value_objects import (
    DependentResource,
    DependentResourceSet,
    Grant,
    GrantCollection,
    GrantDiff,
    GrantKind,
    ProjectId,
    ProjectSettings,
)

__all__ = [
    "DependentResource",
    "DependentResourceSet",
    "DrainState",
    "DrainTick",
    "Grant",
    "GrantCollection",
    "GrantDiff",
    "GrantKind",
    "Project",
    "ProjectId",
    "ProjectSettings",
    "diff_grants",
    "next_drain_state",
]
