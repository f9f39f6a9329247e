"""Repository for Project entity and its candidate-name links."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select

from src.registry.models import Project, ProjectConsideringName, ProjectStatus
from src.registry.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for projects."""

    model = Project

    async def list_all(self, status: ProjectStatus | None = None) -> list[Project]:
        """List projects, optionally filtered by status."""
        query = select(Project)
        if status is not None:
            query = query.where(Project.status == status.value)
        result = await self.session.execute(query.order_by(Project.created_at.asc()))
        return list(result.scalars().all())

    async def get_by_name_id(self, name_id: UUID) -> Project | None:
        """Get the project holding ``name_id`` as its assigned name."""
        result = await self.session.execute(select(Project).where(Project.name_id == name_id))
        return result.scalars().first()

    async def count_by_status(self) -> dict[str, int]:
        """Count projects grouped by status (statuses with no rows are absent)."""
        result = await self.session.execute(
            select(Project.status, func.count()).group_by(Project.status)
        )
        return {row[0]: row[1] for row in result.all()}

    async def get_considering_name_ids(self, project_id: UUID) -> list[UUID]:
        """Get the candidate name ids of a project in their stored order."""
        result = await self.session.execute(
            select(ProjectConsideringName.name_id)
            .where(ProjectConsideringName.project_id == project_id)
            .order_by(ProjectConsideringName.position.asc())
        )
        return list(result.scalars().all())

    async def get_considering_map(self, project_ids: Sequence[UUID]) -> dict[UUID, list[UUID]]:
        """Get candidate name ids for many projects in one query."""
        considering: dict[UUID, list[UUID]] = {project_id: [] for project_id in project_ids}
        if not project_ids:
            return considering
        result = await self.session.execute(
            select(ProjectConsideringName.project_id, ProjectConsideringName.name_id)
            .where(ProjectConsideringName.project_id.in_(project_ids))
            .order_by(ProjectConsideringName.position.asc())
        )
        for project_id, name_id in result.all():
            considering[project_id].append(name_id)
        return considering

    async def replace_considering_name_ids(self, project_id: UUID, name_ids: Sequence[UUID]) -> None:
        """Replace the candidate list of a project (no commit)."""
        await self.session.execute(
            delete(ProjectConsideringName).where(ProjectConsideringName.project_id == project_id)
        )
        for position, name_id in enumerate(name_ids):
            self.session.add(
                ProjectConsideringName(project_id=project_id, name_id=name_id, position=position)
            )

    async def count_considering_references(
        self, name_id: UUID, exclude_project_id: UUID | None = None
    ) -> int:
        """Count projects listing ``name_id`` as a candidate."""
        query = select(func.count()).where(ProjectConsideringName.name_id == name_id)
        if exclude_project_id is not None:
            query = query.where(ProjectConsideringName.project_id != exclude_project_id)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def delete(self, entity: Project) -> None:
        """Delete a project together with its candidate links (no commit)."""
        await self.session.execute(
            delete(ProjectConsideringName).where(ProjectConsideringName.project_id == entity.id)
        )
        await super().delete(entity)
