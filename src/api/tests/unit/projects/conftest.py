"""Fixtures for projects bounded context unit tests."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import create_autospec

import pytest

from projects.application.dependents_drainer import DependentsDrainer
from projects.application.observability import ProjectServiceProbe
from projects.application.services.project_service import ProjectService
from projects.domain.project import Project
from projects.domain.value_objects import (
    EMPTY_GRANTS,
    ProjectId,
    ProjectSettings,
)
from projects.ports.remote import IAtlasProjectsAPI

PROJECT_ID = "5f1a2b3c4d5e6f7a8b9c0d1e"
ORG_ID = "5e0a1b2c3d4e5f6a7b8c9d0e"


@pytest.fixture
def project_id() -> ProjectId:
    return ProjectId.from_string(PROJECT_ID)


@pytest.fixture
def org_id() -> str:
    return ORG_ID


@pytest.fixture
def remote_project(project_id) -> Project:
    """Project core fields as returned by the remote API."""
    return Project(
        id=project_id,
        org_id=ORG_ID,
        name="analytics",
        cluster_count=2,
        created=datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC),
    )


@pytest.fixture
def mock_api(remote_project):
    """Create mock remote API answering with an empty, default project."""
    api = create_autospec(IAtlasProjectsAPI, instance=True)
    api.create_project.return_value = remote_project
    api.get_project.return_value = remote_project
    api.list_teams.return_value = EMPTY_GRANTS
    api.list_api_keys.return_value = EMPTY_GRANTS
    api.get_settings.return_value = ProjectSettings()
    api.update_settings.return_value = ProjectSettings()
    return api


@pytest.fixture
def mock_drainer():
    """Create mock dependents drainer."""
    return create_autospec(DependentsDrainer, instance=True)


@pytest.fixture
def mock_probe():
    """Create mock project service probe."""
    return create_autospec(ProjectServiceProbe, instance=True)


@pytest.fixture
def project_service(mock_api, mock_drainer, mock_probe) -> ProjectService:
    """Create ProjectService with mock dependencies."""
    return ProjectService(api=mock_api, drainer=mock_drainer, probe=mock_probe)
