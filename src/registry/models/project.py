"""Project model and its candidate-name link table."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.registry.models.base import utc_now
from src.registry.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    """A tracked project.

    Candidate names of an idea live in ``project_considering_names``; the
    repository exposes them as an ordered id list.
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    status: str = Field(default=ProjectStatus.IDEA.value, max_length=20, index=True)
    name_id: UUID | None = Field(default=None, foreign_key="names.id", index=True)
    description: str | None = Field(default=None, max_length=2000)
    repo_ref: str | None = Field(default=None, max_length=200)
    deploy_url: str | None = Field(default=None, max_length=2000)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, index=True)

    @property
    def status_enum(self) -> ProjectStatus:
        """Get status as ProjectStatus enum."""
        return ProjectStatus(self.status)

    @property
    def is_idea(self) -> bool:
        return self.status == ProjectStatus.IDEA.value


class ProjectConsideringName(SQLModel, table=True):
    """Link row: an idea project considering a pool name."""

    __tablename__ = "project_considering_names"

    project_id: UUID = Field(foreign_key="projects.id", primary_key=True)
    name_id: UUID = Field(foreign_key="names.id", primary_key=True, index=True)
    position: int = Field(default=0)
