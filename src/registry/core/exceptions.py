"""Domain errors and the exception handlers that render them.

Every error raised by the name/project services derives from ``RegistryError``
and carries a stable ``code`` plus the offending ids/fields, so the HTTP layer
(or any other caller) can render a specific message without parsing text.
"""

from typing import Any
from uuid import UUID

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.registry.core.logging import get_logger

logger = get_logger(__name__)


class RegistryError(Exception):
    """Base exception for the project name registry."""

    code = "registry_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **fields: Any):
        self.message = message
        self.fields = fields
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error kind and structured fields."""
        payload: dict[str, Any] = {"detail": self.message, "code": self.code}
        for key, value in self.fields.items():
            payload[key] = str(value) if isinstance(value, UUID) else value
        return payload


class NotFoundError(RegistryError):
    """Raised when a name or project id does not exist."""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: UUID):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity.capitalize()} {entity_id} not found",
            entity=entity,
            entity_id=entity_id,
        )


class DuplicateNameError(RegistryError):
    """Raised when a name text is already taken (exact, case-sensitive)."""

    code = "duplicate_name"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, text: str):
        self.text = text
        super().__init__(f'Name "{text}" already exists', text=text)


class NameInUseError(RegistryError):
    """Raised when deleting a name that a project still references."""

    code = "in_use"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, name_id: UUID, text: str, name_status: str):
        self.name_id = name_id
        super().__init__(
            f'Name "{text}" is {name_status} and cannot be deleted',
            name_id=name_id,
            name_status=name_status,
        )


class InvalidNameTextError(RegistryError):
    """Raised when a name text is empty after trimming."""

    code = "validation_error"
    status_code = 422

    def __init__(self, text: str):
        self.text = text
        super().__init__("Name cannot be empty or whitespace only", field="text")


class ProjectValidationError(RegistryError):
    """Raised when a candidate project record breaks a business rule."""

    code = "validation_error"
    status_code = 422

    def __init__(self, rule: str, field: str, message: str):
        self.rule = rule
        self.field = field
        super().__init__(message, rule=rule, field=field)


class NameConflictError(RegistryError):
    """Raised when a name is already assigned to a different project."""

    code = "name_conflict"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, name_id: UUID, text: str, assigned_project_id: UUID | None):
        self.name_id = name_id
        self.assigned_project_id = assigned_project_id
        super().__init__(
            f'Name "{text}" is already assigned to another project',
            name_id=name_id,
            assigned_project_id=assigned_project_id,
        )


class InvalidTransitionError(RegistryError):
    """Raised when a name status change is not in the transition table.

    Callers that respect the project rules never reach this; seeing it means
    the stored name state drifted from the project references.
    """

    code = "invalid_transition"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, name_id: UUID, from_status: str, to_status: str):
        self.name_id = name_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid state transition: {from_status} -> {to_status}",
            name_id=name_id,
            from_status=from_status,
            to_status=to_status,
        )


class NotAnIdeaError(RegistryError):
    """Raised when promoting a project that is not an idea."""

    code = "not_an_idea"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, project_id: UUID, project_status: str):
        self.project_id = project_id
        super().__init__(
            f"Can only promote ideas to active (project is {project_status})",
            project_id=project_id,
            project_status=project_status,
        )


class NameNotConsideredError(RegistryError):
    """Raised when promoting an idea with a name it is not considering."""

    code = "name_not_considered"
    status_code = 422

    def __init__(self, project_id: UUID, name_id: UUID):
        self.project_id = project_id
        self.name_id = name_id
        super().__init__(
            "Chosen name is not being considered by this idea",
            project_id=project_id,
            name_id=name_id,
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(RegistryError)
    async def registry_exception_handler(request: Request, exc: RegistryError) -> JSONResponse:
        request_id = correlation_id.get()
        if isinstance(exc, InvalidTransitionError):
            logger.error(
                "Name state drifted from project references",
                request_id=request_id,
                path=request.url.path,
                **exc.to_dict(),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={**exc.to_dict(), "request_id": request_id},
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
