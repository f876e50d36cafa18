"""Exceptions for the projects bounded context.

Remote adapter implementations translate transport and HTTP failures into
these exceptions so that the application layer can decide which failures
are fatal and which only degrade the result.
"""

from __future__ import annotations


class AtlasError(Exception):
    """Base exception for failures talking to the remote API."""

    pass


class TransientNetworkError(AtlasError):
    """Raised when a call failed without a well-formed API error response.

    Covers connection failures, timeouts and error responses whose body
    could not be parsed. The dependents drain loop retries on these.
    """

    pass


class MalformedResponseError(AtlasError):
    """Raised when a successful response does not have the expected shape.

    Covers missing or mistyped fields in an otherwise valid JSON body.
    """

    pass


class AtlasAPIError(AtlasError):
    """Raised when the remote API answered with a well-formed error document.

    Attributes:
        status_code: HTTP status of the response
        error_code: Symbolic error code from the body (e.g. GROUP_NOT_FOUND)
        detail: Human readable explanation from the body
    """

    def __init__(
        self,
        status_code: int,
        error_code: str | None = None,
        detail: str | None = None,
        reason: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail
        self.reason = reason
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"HTTP {self.status_code}"
        if self.reason:
            message += f" ({self.reason})"
        if self.error_code:
            message += f" {self.error_code}"
        if self.detail:
            message += f": {self.detail}"
        return message


class NotFoundError(AtlasAPIError):
    """Raised when the requested remote resource does not exist (HTTP 404)."""

    pass


class AuthorizationDeniedError(AtlasAPIError):
    """Raised when the caller is not allowed to perform the call.

    Non-fatal when reading API keys and when removing a team from a
    project; fatal everywhere else.
    """

    pass


class ProjectNotFoundError(Exception):
    """Raised when importing a project id that does not exist remotely."""

    pass


class ProjectOperationError(Exception):
    """Raised when a lifecycle phase fails.

    Wraps the underlying error with the operation name and the project
    identity. When creation fails after the remote project was created,
    project_id holds the new id so the partial resource can be found.

    Attributes:
        operation: Lifecycle phase (create, read, update, delete)
        project_id: Remote project id, if one is known
    """

    def __init__(self, operation: str, project_id: str | None, message: str) -> None:
        self.operation = operation
        self.project_id = project_id
        target = f"project({project_id})" if project_id else "project"
        super().__init__(f"error during {operation} of {target}: {message}")


class DependentsDrainError(Exception):
    """Base exception for an abandoned wait on a project's dependents."""

    pass


class DrainTimeoutError(DependentsDrainError):
    """Raised when dependents are still deleting after the overall timeout."""

    pass


class DrainRetriesExhaustedError(DependentsDrainError):
    """Raised after too many consecutive ticks without a dependents listing."""

    pass
