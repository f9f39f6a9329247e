"""Name schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.registry.models import NameStatus


def _clean_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty or whitespace only")
    return v


def _clean_notes(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class NameCreate(BaseModel):
    """Schema for adding a name to the pool."""

    text: str = Field(min_length=1, max_length=200)
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _clean_text(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _clean_notes(v)


class NameUpdate(BaseModel):
    """Schema for renaming a name and/or replacing its notes.

    Omitted fields are left alone; ``notes: null`` clears the notes.
    """

    text: str | None = Field(default=None, min_length=1, max_length=200)
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Name text cannot be null")
        return _clean_text(v)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        return _clean_notes(v)


class NameRead(BaseModel):
    """Schema for reading a name."""

    id: UUID
    text: str
    status: NameStatus
    assigned_project_id: UUID | None
    kept_warm: bool
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
