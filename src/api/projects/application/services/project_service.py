"""Project application service for the projects bounded context.

Drives a project through create, read, update, delete and import, turning
declared configuration changes into an ordered sequence of remote calls.
"""

from __future__ import annotations

import dataclasses

from projects.application.dependents_drainer import DependentsDrainer
from projects.application.observability import (
    DefaultProjectServiceProbe,
    ProjectServiceProbe,
)
from projects.application.resource_model import (
    SETTINGS_FIELDS,
    ProjectConfig,
    ProjectState,
)
from projects.domain.grant_diff import diff_grants
from projects.domain.value_objects import (
    EMPTY_GRANTS,
    GrantCollection,
    GrantDiff,
    GrantKind,
    ProjectId,
)
from projects.ports.exceptions import (
    AtlasError,
    AuthorizationDeniedError,
    DependentsDrainError,
    NotFoundError,
    ProjectNotFoundError,
    ProjectOperationError,
)
from projects.ports.remote import IAtlasProjectsAPI

IMMUTABLE_FIELDS = frozenset({"name", "org_id"})


class ProjectService:
    """Application service converging a project on its declared configuration.

    No rollback is attempted: a failure part way through create or update
    leaves the remote project partially converged, and the next read
    reports what actually exists.
    """

    def __init__(
        self,
        api: IAtlasProjectsAPI,
        drainer: DependentsDrainer,
        probe: ProjectServiceProbe | None = None,
    ):
        """Initialize ProjectService with dependencies.

        Args:
            api: Remote API adapter
            drainer: Waits for dependent clusters before deletion
            probe: Optional domain probe for observability
        """
        self._api = api
        self._drainer = drainer
        self._probe = probe or DefaultProjectServiceProbe()

    def _failure(
        self,
        operation: str,
        project_id: ProjectId | None,
        message: str,
    ) -> ProjectOperationError:
        raw_id = project_id.value if project_id is not None else None
        self._probe.operation_failed(operation=operation, project_id=raw_id, error=message)
        return ProjectOperationError(operation, raw_id, message)

    async def create(self, config: ProjectConfig) -> ProjectState:
        """Create a project and push its teams, API keys and settings.

        Teams are added in one bulk call, API keys are assigned one at a
        time, and all five settings are written unconditionally.

        Args:
            config: The declared configuration

        Returns:
            The project state read back after creation

        Raises:
            ProjectOperationError: If any step fails. Its project_id is set
                whenever the remote project was created before the failure.
        """
        project_id: ProjectId | None = None
        try:
            project = await self._api.create_project(
                org_id=config.org_id,
                name=config.name,
                with_default_alerts_settings=config.with_default_alerts_settings,
                project_owner_id=config.project_owner_id,
            )
            project_id = project.id
            self._probe.project_created(
                project_id=project_id.value,
                org_id=config.org_id,
                name=config.name,
            )

            teams = config.team_grants()
            if teams:
                await self._api.add_teams(project_id, teams)

            for grant in config.api_key_grants():
                await self._api.assign_api_key(project_id, grant.identity, grant.roles)

            await self._api.update_settings(project_id, config.resolved_settings())
        except AtlasError as e:
            raise self._failure("create", project_id, str(e)) from e

        state = await self.read(project_id)
        if state is None:
            raise self._failure(
                "create", project_id, "project not found after creation"
            )
        return state

    async def read(self, project_id: ProjectId) -> ProjectState | None:
        """Read the full remote state of a project.

        Fetches core fields, teams, API keys and settings, in that order.

        Returns:
            The project state, or None if the project no longer exists

        Raises:
            ProjectOperationError: If any fetch fails, except a denied API
                key listing which yields an empty api_keys collection
        """
        try:
            project = await self._api.get_project(project_id)
        except NotFoundError:
            self._probe.project_gone(project_id=project_id.value)
            return None
        except AtlasError as e:
            raise self._failure("read", project_id, str(e)) from e

        try:
            teams = await self._api.list_teams(project_id)
            api_keys = await self._read_api_keys(project_id, project.org_id)
            settings = await self._api.get_settings(project_id)
        except AtlasError as e:
            raise self._failure("read", project_id, str(e)) from e

        return ProjectState.from_domain(
            dataclasses.replace(project, teams=teams, api_keys=api_keys, settings=settings)
        )

    async def _read_api_keys(self, project_id: ProjectId, org_id: str) -> GrantCollection:
        try:
            return await self._api.list_api_keys(project_id, org_id)
        except AuthorizationDeniedError as e:
            self._probe.api_keys_unreadable(project_id=project_id.value, error=str(e))
            return EMPTY_GRANTS

    async def update(
        self,
        project_id: ProjectId,
        previous: ProjectConfig,
        desired: ProjectConfig,
    ) -> ProjectState:
        """Converge a project from its previous to its desired configuration.

        Only collections whose declaration changed are diffed. Teams are
        converged first, then API keys, then settings.

        Args:
            project_id: The project to update
            previous: Configuration as last applied
            desired: Newly declared configuration

        Returns:
            The project state read back after the update

        Raises:
            ValueError: If name or org_id would change
            ProjectOperationError: If a remote call fails fatally
        """
        changed = previous.changed_fields(desired)
        immutable = sorted(changed & IMMUTABLE_FIELDS)
        if immutable:
            raise ValueError(
                f"{', '.join(immutable)} cannot be changed on an existing project"
            )

        try:
            if "teams" in changed:
                await self._apply_team_diff(
                    project_id, diff_grants(previous.team_grants(), desired.team_grants())
                )

            if "api_keys" in changed:
                await self._apply_api_key_diff(
                    project_id,
                    diff_grants(previous.api_key_grants(), desired.api_key_grants()),
                )

            declared = desired.declared_settings()
            settings_changes = {
                name: declared[name]
                for name in SETTINGS_FIELDS
                if name in changed and name in declared
            }
            if settings_changes:
                await self._apply_settings(project_id, settings_changes)
        except AtlasError as e:
            raise self._failure("update", project_id, str(e)) from e

        state = await self.read(project_id)
        if state is None:
            raise self._failure(
                "update", project_id, "project not found after update"
            )
        return state

    async def _apply_team_diff(self, project_id: ProjectId, diff: GrantDiff) -> None:
        """Add, then remove, then re-role teams."""
        if diff.added:
            await self._api.add_teams(project_id, diff.added)

        for grant in diff.removed:
            try:
                await self._api.remove_team(project_id, grant.identity)
            except AuthorizationDeniedError as e:
                self._probe.team_removal_denied(
                    project_id=project_id.value,
                    team_id=grant.identity,
                    error=str(e),
                )

        for grant in diff.changed:
            await self._api.update_team_roles(project_id, grant.identity, grant.roles)

        self._record_diff(project_id, GrantKind.TEAM, diff)

    async def _apply_api_key_diff(self, project_id: ProjectId, diff: GrantDiff) -> None:
        """Assign new keys, unassign removed ones, then re-assign changed ones.

        Assignment is an upsert, so new and changed keys use the same call.
        """
        for grant in diff.added:
            await self._api.assign_api_key(project_id, grant.identity, grant.roles)

        for grant in diff.removed:
            await self._api.unassign_api_key(project_id, grant.identity)

        for grant in diff.changed:
            await self._api.assign_api_key(project_id, grant.identity, grant.roles)

        self._record_diff(project_id, GrantKind.API_KEY, diff)

    def _record_diff(self, project_id: ProjectId, kind: GrantKind, diff: GrantDiff) -> None:
        self._probe.grants_reconciled(
            project_id=project_id.value,
            kind=kind.value,
            added=len(diff.added),
            changed=len(diff.changed),
            removed=len(diff.removed),
        )

    async def _apply_settings(self, project_id: ProjectId, changes: dict[str, bool]) -> None:
        """Overlay declared changes on the remote snapshot and write if needed."""
        current = await self._api.get_settings(project_id)
        target = current.overlay(**changes)
        differing = current.changed_fields(target)
        if not differing:
            self._probe.settings_unchanged(project_id=project_id.value)
            return

        await self._api.update_settings(project_id, target)
        self._probe.settings_updated(project_id=project_id.value, fields=sorted(differing))

    async def delete(self, project_id: ProjectId) -> None:
        """Delete a project once its dependents are no longer deleting.

        The wait is advisory: if it fails or times out, deletion is
        attempted anyway.

        Raises:
            ProjectOperationError: If the delete call fails
        """
        try:
            await self._drainer.wait_until_idle(project_id)
        except (DependentsDrainError, AtlasError) as e:
            self._probe.dependents_wait_abandoned(project_id=project_id.value, error=str(e))

        try:
            await self._api.delete_project(project_id)
        except AtlasError as e:
            raise self._failure("delete", project_id, str(e)) from e

        self._probe.project_deleted(project_id=project_id.value)

    async def import_project(self, external_id: str) -> ProjectState:
        """Adopt an existing project by id and read its full state.

        Raises:
            ValueError: If external_id is not a valid project id
            ProjectNotFoundError: If no such project exists
            ProjectOperationError: If reading the project fails
        """
        project_id = ProjectId.from_string(external_id)
        state = await self.read(project_id)
        if state is None:
            raise ProjectNotFoundError(f"Project {external_id} not found")
        return state
