"""Value objects for the projects domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for project identifiers, grants, settings and the
dependent-resource snapshots polled before deletion.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


@dataclass(frozen=True)
class ProjectId:
    """Identifier for a remote project.

    Assigned by the remote side on creation as a 24 character hex ObjectId.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> ProjectId:
        """Create ProjectId from string value.

        Args:
            value: 24 character hexadecimal string

        Returns:
            ProjectId instance

        Raises:
            ValueError: If value is not a valid ObjectId
        """
        if not isinstance(value, str) or not _OBJECT_ID_PATTERN.match(value):
            raise ValueError(f"Invalid ProjectId: {value!r}")

        return cls(value=value)


class GrantKind(StrEnum):
    """The two kinds of identity that can be granted roles on a project."""

    TEAM = "team"
    API_KEY = "api_key"


@dataclass(frozen=True)
class Grant:
    """Assignment of a named identity to a set of role names.

    Equality is whole-record: two grants are equal only when both the
    identity and the role set match.
    """

    identity: str
    roles: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.identity, str) or not self.identity:
            raise ValueError("Grant identity must be a non-empty string")
        if not isinstance(self.roles, frozenset):
            object.__setattr__(self, "roles", frozenset(self.roles))

    def sorted_roles(self) -> list[str]:
        """Return role names in a stable order for wire payloads."""
        return sorted(self.roles)


class GrantCollection:
    """Unordered set of grants keyed by identity.

    A snapshot of either the previously declared or the newly declared
    grants of one kind. Identities are unique within a snapshot.
    """

    __slots__ = ("_grants",)

    def __init__(self, grants: Iterable[Grant] = ()) -> None:
        by_identity: dict[str, frozenset[str]] = {}
        for grant in grants:
            if grant.identity in by_identity:
                raise ValueError(
                    f"Duplicate grant identity in collection: {grant.identity}"
                )
            by_identity[grant.identity] = grant.roles
        self._grants: Mapping[str, frozenset[str]] = MappingProxyType(by_identity)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> GrantCollection:
        """Build a collection from an identity -> role names mapping."""
        return cls(Grant(identity, frozenset(roles)) for identity, roles in mapping.items())

    def as_mapping(self) -> Mapping[str, frozenset[str]]:
        """Read-only identity -> roles view."""
        return self._grants

    def identities(self) -> frozenset[str]:
        return frozenset(self._grants)

    def get(self, identity: str) -> Grant | None:
        roles = self._grants.get(identity)
        if roles is None:
            return None
        return Grant(identity, roles)

    def __iter__(self) -> Iterator[Grant]:
        for identity in sorted(self._grants):
            yield Grant(identity, self._grants[identity])

    def __len__(self) -> int:
        return len(self._grants)

    def __bool__(self) -> bool:
        return bool(self._grants)

    def __contains__(self, identity: object) -> bool:
        return identity in self._grants

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GrantCollection):
            return NotImplemented
        return dict(self._grants) == dict(other._grants)

    def __hash__(self) -> int:
        return hash(frozenset(self._grants.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{g.identity}={g.sorted_roles()}" for g in self)
        return f"GrantCollection({inner})"


EMPTY_GRANTS = GrantCollection()


@dataclass(frozen=True)
class GrantDiff:
    """Outcome of diffing two grant collections.

    Attributes:
        added: Identities only present in the desired snapshot
        changed: Identities present in both whose roles differ (desired roles)
        removed: Identities only present in the previous snapshot (prior roles)
    """

    added: GrantCollection = EMPTY_GRANTS
    changed: GrantCollection = EMPTY_GRANTS
    removed: GrantCollection = EMPTY_GRANTS

    @property
    def is_empty(self) -> bool:
        """True when no remote call is needed to converge."""
        return not (self.added or self.changed or self.removed)


@dataclass(frozen=True)
class ProjectSettings:
    """Feature-flag settings of a project.

    Each flag is toggled independently. Remote defaults are all enabled.
    """

    is_collect_database_specifics_statistics_enabled: bool = True
    is_data_explorer_enabled: bool = True
    is_performance_advisor_enabled: bool = True
    is_realtime_performance_panel_enabled: bool = True
    is_schema_advisor_enabled: bool = True

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    def overlay(self, **changes: bool) -> ProjectSettings:
        """Return a copy with the given flags replaced.

        Raises:
            ValueError: If a name is not a settings flag
        """
        unknown = set(changes) - set(self.field_names())
        if unknown:
            raise ValueError(f"Unknown project settings: {sorted(unknown)}")
        return dataclasses.replace(self, **changes)

    def changed_fields(self, other: ProjectSettings) -> dict[str, bool]:
        """Flags whose value in `other` differs from this snapshot."""
        return {
            name: getattr(other, name)
            for name in self.field_names()
            if getattr(self, name) != getattr(other, name)
        }


@dataclass(frozen=True)
class DependentResource:
    """A resource (cluster) that must be gone before its project can be deleted."""

    name: str
    status: str

    @property
    def is_deleting(self) -> bool:
        return self.status.upper() == "DELETING"


@dataclass(frozen=True)
class DependentResourceSet:
    """Snapshot of the dependents of one project, replaced on every poll."""

    total_count: int
    resources: tuple[DependentResource, ...] = ()
