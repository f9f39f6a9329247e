"""Linking engine - keeps name statuses consistent with project references.

Every method runs inside the caller's transaction and never commits. The
project service wraps each call in one transaction and rolls back on error,
so a failed link leaves neither the project row nor any name changed.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.registry.core.exceptions import (
    NameConflictError,
    NameNotConsideredError,
    NotAnIdeaError,
    NotFoundError,
)
from src.registry.core.logging import get_logger
from src.registry.models import NameStatus, Project, ProjectStatus
from src.registry.models.base import utc_now
from src.registry.repositories import ProjectRepository
from src.registry.services.name_service import NameService

logger = get_logger(__name__)


@dataclass(frozen=True)
class LinkState:
    """The name references of a project at one point in time."""

    status: ProjectStatus
    name_id: UUID | None = None
    considering_name_ids: tuple[UUID, ...] = field(default_factory=tuple)


class LinkingService:
    """Applies and reverses name-side effects of project writes."""

    def __init__(
        self,
        name_service: NameService,
        project_repo: ProjectRepository,
        session: AsyncSession,
    ):
        self.name_service = name_service
        self.project_repo = project_repo
        self.session = session

    async def apply_links(
        self,
        project_id: UUID,
        status: ProjectStatus,
        name_id: UUID | None,
        considering_name_ids: Sequence[UUID],
    ) -> None:
        """Link every name a project in ``status`` references.

        Ideas mark their candidates ``considering``; any other status assigns
        ``name_id`` to the project.

        Raises:
            NameConflictError: If a name is assigned to a different project.
            NotFoundError: If a referenced name does not exist.
        """
        if status is ProjectStatus.IDEA:
            for considering_id in considering_name_ids:
                await self._link_considering(project_id, considering_id)
        elif name_id is not None:
            await self._link_assigned(project_id, name_id)

    async def reconcile_links(self, project_id: UUID, old: LinkState, new: LinkState) -> None:
        """Apply only the delta between two reference sets.

        Releases run before links so a name dropped and re-added in the same
        update does not conflict with itself.
        """
        old_considering = set(old.considering_name_ids)
        new_considering = set(new.considering_name_ids)

        for removed_id in old.considering_name_ids:
            if removed_id not in new_considering:
                await self._release(project_id, removed_id)
        if old.name_id is not None and old.name_id != new.name_id:
            await self._release(project_id, old.name_id)

        for added_id in new.considering_name_ids:
            if added_id not in old_considering:
                await self._link_considering(project_id, added_id)
        if new.name_id is not None and new.name_id != old.name_id:
            await self._link_assigned(project_id, new.name_id)

    async def promote_idea(self, project_id: UUID, chosen_name_id: UUID) -> Project:
        """Turn an idea into an active project named after one of its candidates.

        Raises:
            NotFoundError: If the project does not exist.
            NotAnIdeaError: If the project is not an idea.
            NameNotConsideredError: If the idea does not consider the chosen name.
            NameConflictError: If the chosen name is assigned elsewhere.
        """
        project = await self._get_project(project_id)
        if not project.is_idea:
            raise NotAnIdeaError(project_id, project.status)

        considering_ids = await self.project_repo.get_considering_name_ids(project_id)
        if chosen_name_id not in considering_ids:
            raise NameNotConsideredError(project_id, chosen_name_id)

        for other_id in considering_ids:
            if other_id != chosen_name_id:
                await self._release(project_id, other_id)
        await self._link_assigned(project_id, chosen_name_id)

        project.status = ProjectStatus.ACTIVE.value
        project.name_id = chosen_name_id
        project.updated_at = utc_now()
        await self.project_repo.replace_considering_name_ids(project_id, [])

        logger.info(
            "Idea promoted",
            project_id=str(project_id),
            name_id=str(chosen_name_id),
            released=len(considering_ids) - 1,
        )
        return project

    async def release_all(self, project_id: UUID, release_to_pool: bool) -> None:
        """Release every name a project references.

        With ``release_to_pool=False`` the assigned name is kept warm: it ends
        up ``considering`` with ``kept_warm`` set instead of ``available``.
        Calling this again on the same project changes nothing further.

        Raises:
            NotFoundError: If the project does not exist.
        """
        project = await self._get_project(project_id)
        if project.name_id is not None:
            await self._release(project_id, project.name_id, keep_warm=not release_to_pool)
        for considering_id in await self.project_repo.get_considering_name_ids(project_id):
            await self._release(project_id, considering_id)

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        return project

    async def _link_considering(self, project_id: UUID, name_id: UUID) -> None:
        name = await self.name_service.get_name(name_id)
        status = name.status_enum
        if status is NameStatus.ASSIGNED and name.assigned_project_id != project_id:
            raise NameConflictError(name_id, name.text, name.assigned_project_id)
        if status is NameStatus.CONSIDERING:
            # Already considered by another idea or kept warm
            await self.name_service.set_kept_warm(name_id, False)
            return
        await self.name_service.transition(name_id, NameStatus.CONSIDERING)

    async def _link_assigned(self, project_id: UUID, name_id: UUID) -> None:
        name = await self.name_service.get_name(name_id)
        if name.is_assigned:
            if name.assigned_project_id == project_id:
                return
            raise NameConflictError(name_id, name.text, name.assigned_project_id)
        await self.name_service.transition(
            name_id, NameStatus.ASSIGNED, assigned_project_id=project_id
        )

    async def _release(self, project_id: UUID, name_id: UUID, keep_warm: bool = False) -> None:
        """Move a name to the status its remaining references imply."""
        name = await self.name_service.get_name(name_id)
        status = name.status_enum

        if status is NameStatus.ASSIGNED and name.assigned_project_id != project_id:
            logger.warning(
                "Skipping release of name assigned elsewhere",
                project_id=str(project_id),
                name_id=str(name_id),
                assigned_project_id=str(name.assigned_project_id),
            )
            return

        others = await self.project_repo.count_considering_references(
            name_id, exclude_project_id=project_id
        )
        if status is NameStatus.ASSIGNED:
            await self.name_service.transition(name_id, NameStatus.AVAILABLE)
            if others or keep_warm:
                await self.name_service.transition(
                    name_id, NameStatus.CONSIDERING, kept_warm=not others
                )
        elif status is NameStatus.CONSIDERING and not others and not name.kept_warm:
            await self.name_service.transition(name_id, NameStatus.AVAILABLE)
