"""Name model - the pool of reusable project names."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.registry.models.base import utc_now
from src.registry.models.enums import NameStatus


class Name(SQLModel, table=True):
    """A reusable project name.

    ``status`` and ``assigned_project_id`` mirror the project references and
    are written only through ``NameService.transition``.
    """

    __tablename__ = "names"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    text: str = Field(max_length=200, unique=True, index=True)
    status: str = Field(default=NameStatus.AVAILABLE.value, max_length=20, index=True)
    assigned_project_id: UUID | None = Field(default=None, index=True)
    kept_warm: bool = Field(default=False)
    notes: str | None = Field(default=None, max_length=2000)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> NameStatus:
        """Get status as NameStatus enum."""
        return NameStatus(self.status)

    @property
    def is_assigned(self) -> bool:
        return self.status == NameStatus.ASSIGNED.value
