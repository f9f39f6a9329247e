"""Test helper functions for common data creation patterns."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.registry.core.db import get_session
from src.registry.models import Name, NameStatus, Project, ProjectConsideringName, ProjectStatus
from src.registry.repositories import NameRepository, ProjectRepository
from src.registry.services import (
    LinkingService,
    NameService,
    ProjectDraft,
    ProjectQueryService,
    ProjectService,
)
from tests.factories import NameFactory


@dataclass
class Registry:
    """All services wired to one session, as the API dependencies do."""

    session: AsyncSession
    names: NameService
    linking: LinkingService
    projects: ProjectService
    queries: ProjectQueryService


def build_registry(session: AsyncSession) -> Registry:
    name_repo = NameRepository(session)
    project_repo = ProjectRepository(session)
    name_service = NameService(name_repo, project_repo, session)
    linking_service = LinkingService(name_service, project_repo, session)
    return Registry(
        session=session,
        names=name_service,
        linking=linking_service,
        projects=ProjectService(project_repo, linking_service, session),
        queries=ProjectQueryService(project_repo, name_repo),
    )


async def create_names(session: AsyncSession, *texts: str) -> list[Name]:
    """Insert available names through a sibling session and commit.

    The returned objects are detached, so a rollback in ``session`` never
    expires them.
    """
    names = [NameFactory.build(text=text) for text in texts]
    async with get_session(session.bind) as writer:
        writer.add_all(names)
        await writer.commit()
    return names


def draft(status: ProjectStatus = ProjectStatus.IDEA, **fields) -> ProjectDraft:
    """Build a project draft the way the API normalizes a create payload."""
    return ProjectDraft(status=status).merge(fields)


async def reload_name(session: AsyncSession, name_id: UUID) -> Name:
    """Read a name's committed state, bypassing the identity map."""
    result = await session.execute(
        select(Name).where(Name.id == name_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def assert_registry_consistent(session: AsyncSession) -> None:
    """Check the name/project invariants over the whole database.

    - a name is assigned iff exactly one project holds it, and it points back
    - a name is considering iff nobody holds it and an idea lists it or it is kept warm
    - a project is an idea iff it has no name
    """
    project_repo = ProjectRepository(session)
    names = (
        (await session.execute(select(Name).execution_options(populate_existing=True)))
        .scalars()
        .all()
    )
    projects = (
        (await session.execute(select(Project).execution_options(populate_existing=True)))
        .scalars()
        .all()
    )

    for project in projects:
        assert (project.status == ProjectStatus.IDEA.value) == (project.name_id is None)

    for name in names:
        holders = [p.id for p in projects if p.name_id == name.id]
        listed = (
            await session.execute(
                select(func.count()).where(ProjectConsideringName.name_id == name.id)
            )
        ).scalar_one()

        if name.status == NameStatus.ASSIGNED.value:
            assert holders == [name.assigned_project_id], name.text
            holder = await project_repo.get_by_name_id(name.id)
            assert holder is not None and holder.id == name.assigned_project_id, name.text
        else:
            assert holders == [], name.text
            assert name.assigned_project_id is None, name.text

        is_considering = name.status == NameStatus.CONSIDERING.value
        if not holders:
            assert is_considering == (listed > 0 or name.kept_warm), name.text
