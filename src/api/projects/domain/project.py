"""Project entity for the projects domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from projects.domain.value_objects import (
    EMPTY_GRANTS,
    GrantCollection,
    ProjectId,
    ProjectSettings,
)


@dataclass(frozen=True)
class Project:
    """A project as reconstituted from the remote side.

    The id is assigned remotely on creation. cluster_count and created are
    read-only remote facts; teams, api_keys and settings are converged
    against the declared configuration.
    """

    id: ProjectId
    org_id: str
    name: str
    cluster_count: int = 0
    created: datetime | None = None
    teams: GrantCollection = EMPTY_GRANTS
    api_keys: GrantCollection = EMPTY_GRANTS
    settings: ProjectSettings = field(default_factory=ProjectSettings)
