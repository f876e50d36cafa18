"""Remote API protocol (port) for the projects bounded context.

The protocol defines the narrow surface of the cloud API that project
convergence consumes. Implementations raise the exceptions from
projects.ports.exceptions rather than transport-specific errors.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from projects.domain.project import Project
from projects.domain.value_objects import (
    DependentResourceSet,
    GrantCollection,
    ProjectId,
    ProjectSettings,
)


@runtime_checkable
class IAtlasProjectsAPI(Protocol):
    """Remote operations on a project and its grants, settings and dependents."""

    async def create_project(
        self,
        org_id: str,
        name: str,
        with_default_alerts_settings: bool,
        project_owner_id: str | None = None,
    ) -> Project:
        """Create a project.

        Args:
            org_id: Organization that will own the project
            name: Project name
            with_default_alerts_settings: Whether to install default alerts
            project_owner_id: Optional user to make project owner

        Returns:
            The created Project, carrying its remotely assigned id
        """
        ...

    async def get_project(self, project_id: ProjectId) -> Project:
        """Fetch project core fields.

        Raises:
            NotFoundError: If the project does not exist
        """
        ...

    async def delete_project(self, project_id: ProjectId) -> None:
        """Delete a project."""
        ...

    async def list_teams(self, project_id: ProjectId) -> GrantCollection:
        """List teams assigned to the project with their role names."""
        ...

    async def add_teams(self, project_id: ProjectId, teams: GrantCollection) -> None:
        """Assign all given teams to the project in a single call."""
        ...

    async def remove_team(self, project_id: ProjectId, team_id: str) -> None:
        """Remove one team from the project."""
        ...

    async def update_team_roles(
        self,
        project_id: ProjectId,
        team_id: str,
        roles: frozenset[str],
    ) -> None:
        """Replace the role names of one team already in the project."""
        ...

    async def list_api_keys(self, project_id: ProjectId, org_id: str) -> GrantCollection:
        """List organization API keys that hold roles on the project.

        Raises:
            AuthorizationDeniedError: If the caller may not read API keys
        """
        ...

    async def assign_api_key(
        self,
        project_id: ProjectId,
        api_key_id: str,
        roles: frozenset[str],
    ) -> None:
        """Assign an API key to the project with the given roles (upsert)."""
        ...

    async def unassign_api_key(self, project_id: ProjectId, api_key_id: str) -> None:
        """Remove an API key from the project."""
        ...

    async def get_settings(self, project_id: ProjectId) -> ProjectSettings:
        """Fetch the project's feature-flag settings."""
        ...

    async def update_settings(
        self,
        project_id: ProjectId,
        settings: ProjectSettings,
    ) -> ProjectSettings:
        """Write the project's feature-flag settings."""
        ...

    async def list_dependents(self, project_id: ProjectId) -> DependentResourceSet:
        """List clusters belonging to the project with their lifecycle status."""
        ...
