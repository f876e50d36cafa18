"""Pydantic models for the declarative project configuration and state.

ProjectConfig is what the surrounding configuration layer declares;
ProjectState is what a read hands back to it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from projects.domain.project import Project
from projects.domain.value_objects import Grant, GrantCollection, ProjectSettings

SETTINGS_FIELDS: tuple[str, ...] = ProjectSettings.field_names()


class GrantModel(BaseModel):
    """A team or API key with the role names it holds on the project."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., min_length=1, description="Team id or API key id")
    role_names: frozenset[str] = Field(
        default_factory=frozenset,
        description="Project role names granted to the identity",
    )

    @field_validator("identity")
    @classmethod
    def validate_identity_is_one_segment(cls, identity: str) -> str:
        """Reject ids that cannot name a single team or API key."""
        if "/" in identity or identity.strip(".") == "":
            raise ValueError(f"invalid team or API key id: {identity!r}")
        return identity

    def to_domain(self) -> Grant:
        return Grant(identity=self.identity, roles=self.role_names)

    @classmethod
    def from_domain(cls, grant: Grant) -> GrantModel:
        return cls(identity=grant.identity, role_names=grant.roles)


def _grants_to_domain(grants: list[GrantModel]) -> GrantCollection:
    return GrantCollection(grant.to_domain() for grant in grants)


def _grants_from_domain(grants: GrantCollection) -> list[GrantModel]:
    return [GrantModel.from_domain(grant) for grant in grants]


class ProjectConfig(BaseModel):
    """Declared configuration of a project.

    name and org_id can only be set at creation. project_owner_id and
    with_default_alerts_settings are only sent on create and never read
    back. A settings flag left as None takes the remote default.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Project name")
    org_id: str = Field(..., min_length=1, description="Owning organization id")
    teams: list[GrantModel] = Field(default_factory=list)
    api_keys: list[GrantModel] = Field(default_factory=list)
    project_owner_id: str | None = Field(
        None, description="User made owner at creation time"
    )
    with_default_alerts_settings: bool = Field(
        True, description="Install the default alert configurations on create"
    )
    is_collect_database_specifics_statistics_enabled: bool | None = None
    is_data_explorer_enabled: bool | None = None
    is_performance_advisor_enabled: bool | None = None
    is_realtime_performance_panel_enabled: bool | None = None
    is_schema_advisor_enabled: bool | None = None

    @field_validator("teams", "api_keys")
    @classmethod
    def validate_unique_identities(cls, grants: list[GrantModel]) -> list[GrantModel]:
        """Reject the same identity declared twice."""
        seen: set[str] = set()
        for grant in grants:
            if grant.identity in seen:
                raise ValueError(f"identity {grant.identity!r} is declared more than once")
            seen.add(grant.identity)
        return grants

    def team_grants(self) -> GrantCollection:
        return _grants_to_domain(self.teams)

    def api_key_grants(self) -> GrantCollection:
        return _grants_to_domain(self.api_keys)

    def declared_settings(self) -> dict[str, bool]:
        """Settings flags that are explicitly set."""
        return {
            name: getattr(self, name)
            for name in SETTINGS_FIELDS
            if getattr(self, name) is not None
        }

    def resolved_settings(self) -> ProjectSettings:
        """All five flags, unset ones falling back to the remote defaults."""
        return ProjectSettings().overlay(**self.declared_settings())

    def changed_fields(self, desired: ProjectConfig) -> set[str]:
        """Names of fields whose declared value differs in `desired`.

        Grant lists compare as identity-keyed sets, so reordering is not a
        change.
        """
        changed: set[str] = set()
        for name in type(self).model_fields:
            before: Any = getattr(self, name)
            after: Any = getattr(desired, name)
            if name in ("teams", "api_keys"):
                before, after = set(before), set(after)
            if before != after:
                changed.add(name)
        return changed


class ProjectState(BaseModel):
    """Project as read back from the remote side."""

    id: str
    name: str
    org_id: str
    cluster_count: int = 0
    created: datetime | None = None
    teams: list[GrantModel] = Field(default_factory=list)
    api_keys: list[GrantModel] = Field(default_factory=list)
    is_collect_database_specifics_statistics_enabled: bool
    is_data_explorer_enabled: bool
    is_performance_advisor_enabled: bool
    is_realtime_performance_panel_enabled: bool
    is_schema_advisor_enabled: bool

    @model_validator(mode="after")
    def sort_grants(self) -> ProjectState:
        """Keep grant lists in a stable identity order."""
        self.teams.sort(key=lambda grant: grant.identity)
        self.api_keys.sort(key=lambda grant: grant.identity)
        return self

    @classmethod
    def from_domain(cls, project: Project) -> ProjectState:
        """Convert a reconstituted Project to the declarative state."""
        settings = {name: getattr(project.settings, name) for name in SETTINGS_FIELDS}
        return cls(
            id=project.id.value,
            name=project.name,
            org_id=project.org_id,
            cluster_count=project.cluster_count,
            created=project.created,
            teams=_grants_from_domain(project.teams),
            api_keys=_grants_from_domain(project.api_keys),
            **settings,
        )

    def to_config(self) -> ProjectConfig:
        """Declared configuration matching this state.

        Useful as the `previous` side of an update after an import.
        """
        return ProjectConfig(
            name=self.name,
            org_id=self.org_id,
            teams=self.teams,
            api_keys=self.api_keys,
            **{name: getattr(self, name) for name in SETTINGS_FIELDS},
        )
