"""Project schemas for API request/response.

Input schemas normalize the payload (trimmed strings, blank to ``None``,
de-duplicated tags and candidate ids). Business rules are checked later on
the merged record by the project service.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.registry.models import ProjectStatus


def _clean_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


def _clean_tags(v: list[str] | None) -> list[str]:
    if not v:
        return []
    tags = (tag.strip() for tag in v)
    return list(dict.fromkeys(tag for tag in tags if tag))


def _dedupe_ids(v: list[UUID] | None) -> list[UUID]:
    if not v:
        return []
    return list(dict.fromkeys(v))


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    status: ProjectStatus = ProjectStatus.IDEA
    name_id: UUID | None = None
    considering_name_ids: list[UUID] = Field(default_factory=list)
    description: str | None = Field(default=None, max_length=2000)
    repo_ref: str | None = Field(
        default=None,
        max_length=200,
        json_schema_extra={"examples": ["octocat/hello-world"]},
    )
    deploy_url: str | None = Field(default=None, max_length=2000)
    tags: list[str] = Field(default_factory=list)

    @field_validator("description", "repo_ref", "deploy_url")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return _clean_optional(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)

    @field_validator("considering_name_ids")
    @classmethod
    def validate_considering_name_ids(cls, v: list[UUID]) -> list[UUID]:
        return _dedupe_ids(v)


class ProjectUpdate(BaseModel):
    """Schema for a partial project update.

    Only fields present in the request body are applied. ``null`` clears a
    field; for ``tags`` and ``considering_name_ids`` it means an empty list.
    """

    status: ProjectStatus | None = None
    name_id: UUID | None = None
    considering_name_ids: list[UUID] | None = None
    description: str | None = Field(default=None, max_length=2000)
    repo_ref: str | None = Field(default=None, max_length=200)
    deploy_url: str | None = Field(default=None, max_length=2000)
    tags: list[str] | None = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: ProjectStatus | None) -> ProjectStatus:
        if v is None:
            raise ValueError("Project status cannot be null")
        return v

    @field_validator("description", "repo_ref", "deploy_url")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return _clean_optional(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str]:
        return _clean_tags(v)

    @field_validator("considering_name_ids")
    @classmethod
    def validate_considering_name_ids(cls, v: list[UUID] | None) -> list[UUID]:
        return _dedupe_ids(v)

    def to_changes(self) -> dict[str, Any]:
        """Fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class PromoteRequest(BaseModel):
    """Schema for promoting an idea to an active project."""

    name_id: UUID


class ProjectRead(BaseModel):
    """A project enriched with resolved name text."""

    id: UUID
    status: ProjectStatus
    name_id: UUID | None
    name: str | None
    considering_name_ids: list[UUID]
    considering_names: list[str]
    display_name: str | None
    description: str | None
    repo_ref: str | None
    deploy_url: str | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class ProjectStats(BaseModel):
    total: int
    by_status: dict[str, int]
