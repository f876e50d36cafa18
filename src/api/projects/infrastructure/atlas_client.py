"""HTTP adapter for the MongoDB Atlas Admin API.

Implements IAtlasProjectsAPI on top of an httpx AsyncClient authenticated
with an organization programmatic API key (HTTP digest auth).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from infrastructure.version import __version__
from projects.domain.project import Project
from projects.domain.value_objects import (
    DependentResource,
    DependentResourceSet,
    Grant,
    GrantCollection,
    ProjectId,
    ProjectSettings,
)
from projects.infrastructure.observability.atlas_client_probe import (
    AtlasClientProbe,
    DefaultAtlasClientProbe,
)
from projects.ports.exceptions import (
    AtlasAPIError,
    AtlasError,
    AuthorizationDeniedError,
    MalformedResponseError,
    NotFoundError,
    TransientNetworkError,
)

T = TypeVar("T")

API_V1 = "/api/atlas/v1.0"
API_V1_5 = "/api/atlas/v1.5"

UNAUTHORIZED_ERROR_CODE = "USER_UNAUTHORIZED"

# Domain flag name -> Atlas settings document key
_SETTINGS_KEYS: dict[str, str] = {
    "is_collect_database_specifics_statistics_enabled": "isCollectDatabaseSpecificsStatisticsEnabled",
    "is_data_explorer_enabled": "isDataExplorerEnabled",
    "is_performance_advisor_enabled": "isPerformanceAdvisorEnabled",
    "is_realtime_performance_panel_enabled": "isRealtimePerformancePanelEnabled",
    "is_schema_advisor_enabled": "isSchemaAdvisorEnabled",
}


class AtlasClient:
    """Atlas Admin API client implementing IAtlasProjectsAPI.

    Transport failures, non-JSON bodies and error responses without an Atlas
    error document surface as TransientNetworkError; error documents surface
    as AtlasAPIError or one of its subclasses; JSON bodies missing expected
    fields surface as MalformedResponseError. Caller supplied ids are
    percent-encoded so each one stays a single path segment.
    """

    def __init__(
        self,
        base_url: str,
        public_key: str,
        private_key: str,
        timeout_seconds: float = 30.0,
        items_per_page: int = 500,
        probe: AtlasClientProbe | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Atlas base URL (e.g., "https://cloud.mongodb.com")
            public_key: Programmatic API key public part
            private_key: Programmatic API key private part
            timeout_seconds: Per-request timeout
            items_per_page: Page size used for list endpoints
            probe: Optional domain probe for observability
            transport: Optional httpx transport (tests use MockTransport)
        """
        self._items_per_page = items_per_page
        self._probe = probe or DefaultAtlasClientProbe()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=httpx.DigestAuth(public_key, private_key),
            timeout=timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": f"atlas-project-reconciler/{__version__}",
            },
            transport=transport,
        )

    async def __aenter__(self) -> AtlasClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TransportError as e:
            self._probe.request_failed(method=method, path=path, reason=repr(e))
            raise TransientNetworkError(f"{method} {path} failed: {e!r}") from e

        if response.is_success:
            if not response.content:
                self._probe.request_completed(
                    method=method, path=path, status_code=response.status_code
                )
                return None
            try:
                body = response.json()
            except ValueError as e:
                # e.g. a maintenance page served with 200
                self._probe.request_failed(
                    method=method,
                    path=path,
                    reason="response body is not JSON",
                    status_code=response.status_code,
                )
                raise TransientNetworkError(
                    f"{method} {path} returned HTTP {response.status_code} "
                    "with a non-JSON body"
                ) from e
            self._probe.request_completed(
                method=method, path=path, status_code=response.status_code
            )
            return body

        error = self._error_from_response(response)
        self._probe.request_failed(
            method=method,
            path=path,
            reason=str(error),
            status_code=response.status_code,
            error_code=getattr(error, "error_code", None),
        )
        raise error

    def _error_from_response(self, response: httpx.Response) -> AtlasError:
        """Classify a non-2xx response."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict) or not ("errorCode" in body or "detail" in body):
            return TransientNetworkError(
                f"HTTP {response.status_code} without an API error document"
            )

        kwargs = {
            "status_code": response.status_code,
            "error_code": body.get("errorCode"),
            "detail": body.get("detail"),
            "reason": body.get("reason"),
        }
        if response.status_code == httpx.codes.NOT_FOUND:
            return NotFoundError(**kwargs)
        if (
            body.get("errorCode") == UNAUTHORIZED_ERROR_CODE
            or response.status_code == httpx.codes.FORBIDDEN
        ):
            return AuthorizationDeniedError(**kwargs)
        return AtlasAPIError(**kwargs)

    @staticmethod
    def _segment(value: str) -> str:
        """Percent-encode a caller supplied id for use as one path segment.

        Dot-only ids are encoded too, otherwise URL normalization would
        resolve them against the parent path.
        """
        if value.strip(".") == "":
            return value.replace(".", "%2E")
        return quote(value, safe="")

    @staticmethod
    def _decode(path: str, mapper: Callable[[Any], T], body: Any) -> T:
        """Map a response body, reporting unexpected shapes as MalformedResponseError."""
        try:
            return mapper(body)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"unexpected response body from {path}: {e!r}") from e

    async def _list_all(self, path: str) -> tuple[list[Any], int]:
        """Collect every page of a list endpoint.

        Returns:
            All results and the reported total count
        """
        results: list[Any] = []
        page_num = 1
        while True:
            body = await self._request(
                "GET",
                path,
                params={"itemsPerPage": self._items_per_page, "pageNum": page_num},
            ) or {}
            if not isinstance(body, dict) or not isinstance(body.get("results", []), list):
                raise MalformedResponseError(f"unexpected list body from {path}")
            batch = body.get("results", [])
            results.extend(batch)
            total_count = body.get("totalCount", len(results))
            if not isinstance(total_count, int):
                raise MalformedResponseError(f"unexpected totalCount from {path}")
            if not batch or len(results) >= total_count:
                return results, total_count
            page_num += 1

    @staticmethod
    def _project_from_body(body: dict[str, Any]) -> Project:
        created = body.get("created")
        return Project(
            id=ProjectId.from_string(body["id"]),
            org_id=body["orgId"],
            name=body["name"],
            cluster_count=body.get("clusterCount", 0),
            created=datetime.fromisoformat(created) if created else None,
        )

    @staticmethod
    def _settings_from_body(body: dict[str, Any]) -> ProjectSettings:
        defaults = ProjectSettings()
        values = {}
        for name, key in _SETTINGS_KEYS.items():
            value = body.get(key)
            values[name] = getattr(defaults, name) if value is None else bool(value)
        return ProjectSettings(**values)

    @staticmethod
    def _grants_from_teams(results: list[dict[str, Any]]) -> GrantCollection:
        return GrantCollection(
            Grant(team["teamId"], frozenset(team.get("roleNames") or []))
            for team in results
        )

    @staticmethod
    def _grants_from_api_keys(
        results: list[dict[str, Any]],
        project_id: ProjectId,
    ) -> GrantCollection:
        """Keep only the roles scoped to this project; keys with none are left out."""
        grants = []
        for key in results:
            roles = frozenset(
                role["roleName"]
                for role in key.get("roles") or []
                if role.get("groupId") == project_id.value
            )
            if roles:
                grants.append(Grant(key["id"], roles))
        return GrantCollection(grants)

    @staticmethod
    def _dependents_from_results(
        results: list[dict[str, Any]],
        total_count: int,
    ) -> DependentResourceSet:
        return DependentResourceSet(
            total_count=int(total_count),
            resources=tuple(
                DependentResource(
                    name=cluster.get("name") or "",
                    status=cluster.get("stateName") or "",
                )
                for cluster in results
            ),
        )

    async def create_project(
        self,
        org_id: str,
        name: str,
        with_default_alerts_settings: bool,
        project_owner_id: str | None = None,
    ) -> Project:
        path = f"{API_V1}/groups"
        params = {"projectOwnerId": project_owner_id} if project_owner_id else None
        body = await self._request(
            "POST",
            path,
            json={
                "name": name,
                "orgId": org_id,
                "withDefaultAlertsSettings": with_default_alerts_settings,
            },
            params=params,
        )
        return self._decode(path, self._project_from_body, body)

    async def get_project(self, project_id: ProjectId) -> Project:
        path = f"{API_V1}/groups/{self._segment(project_id.value)}"
        body = await self._request("GET", path)
        return self._decode(path, self._project_from_body, body)

    async def delete_project(self, project_id: ProjectId) -> None:
        await self._request("DELETE", f"{API_V1}/groups/{self._segment(project_id.value)}")

    async def list_teams(self, project_id: ProjectId) -> GrantCollection:
        path = f"{API_V1}/groups/{self._segment(project_id.value)}/teams"
        results, _ = await self._list_all(path)
        return self._decode(path, self._grants_from_teams, results)

    async def add_teams(self, project_id: ProjectId, teams: GrantCollection) -> None:
        await self._request(
            "POST",
            f"{API_V1}/groups/{self._segment(project_id.value)}/teams",
            json=[
                {"teamId": grant.identity, "roleNames": grant.sorted_roles()}
                for grant in teams
            ],
        )

    async def remove_team(self, project_id: ProjectId, team_id: str) -> None:
        await self._request(
            "DELETE",
            f"{API_V1}/groups/{self._segment(project_id.value)}"
            f"/teams/{self._segment(team_id)}",
        )

    async def update_team_roles(
        self,
        project_id: ProjectId,
        team_id: str,
        roles: frozenset[str],
    ) -> None:
        await self._request(
            "PATCH",
            f"{API_V1}/groups/{self._segment(project_id.value)}"
            f"/teams/{self._segment(team_id)}",
            json={"roleNames": sorted(roles)},
        )

    async def list_api_keys(self, project_id: ProjectId, org_id: str) -> GrantCollection:
        """List organization API keys holding roles on the project."""
        path = f"{API_V1}/orgs/{self._segment(org_id)}/apiKeys"
        results, _ = await self._list_all(path)
        return self._decode(
            path,
            lambda keys: self._grants_from_api_keys(keys, project_id),
            results,
        )

    async def assign_api_key(
        self,
        project_id: ProjectId,
        api_key_id: str,
        roles: frozenset[str],
    ) -> None:
        await self._request(
            "PATCH",
            f"{API_V1}/groups/{self._segment(project_id.value)}"
            f"/apiKeys/{self._segment(api_key_id)}",
            json={"roles": sorted(roles)},
        )

    async def unassign_api_key(self, project_id: ProjectId, api_key_id: str) -> None:
        await self._request(
            "DELETE",
            f"{API_V1}/groups/{self._segment(project_id.value)}"
            f"/apiKeys/{self._segment(api_key_id)}",
        )

    async def get_settings(self, project_id: ProjectId) -> ProjectSettings:
        path = f"{API_V1}/groups/{self._segment(project_id.value)}/settings"
        body = await self._request("GET", path)
        return self._decode(path, self._settings_from_body, body or {})

    async def update_settings(
        self,
        project_id: ProjectId,
        settings: ProjectSettings,
    ) -> ProjectSettings:
        path = f"{API_V1}/groups/{self._segment(project_id.value)}/settings"
        body = await self._request(
            "PATCH",
            path,
            json={key: getattr(settings, name) for name, key in _SETTINGS_KEYS.items()},
        )
        if not body:
            return settings
        return self._decode(path, self._settings_from_body, body)

    async def list_dependents(self, project_id: ProjectId) -> DependentResourceSet:
        path = f"{API_V1_5}/groups/{self._segment(project_id.value)}/clusters"
        results, total_count = await self._list_all(path)
        return self._decode(
            path,
            lambda clusters: self._dependents_from_results(clusters, total_count),
            results,
        )
