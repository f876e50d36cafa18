"""Application services for the projects bounded context."""

from projects.application.services.project_service import ProjectService

__all__ = ["ProjectService"]
