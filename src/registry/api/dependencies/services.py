"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.registry.api.dependencies.db import DBSession
from src.registry.api.dependencies.repositories import NameRepo, ProjectRepo
from src.registry.services import (
    LinkingService,
    NameService,
    ProjectQueryService,
    ProjectService,
)


def get_name_service(
    name_repo: NameRepo, project_repo: ProjectRepo, session: DBSession
) -> NameService:
    """Get name service."""
    return NameService(name_repo, project_repo, session)


def get_linking_service(
    name_service: Annotated[NameService, Depends(get_name_service)],
    project_repo: ProjectRepo,
    session: DBSession,
) -> LinkingService:
    """Get linking engine sharing the request session."""
    return LinkingService(name_service, project_repo, session)


def get_project_service(
    project_repo: ProjectRepo,
    linking_service: Annotated[LinkingService, Depends(get_linking_service)],
    session: DBSession,
) -> ProjectService:
    """Get project service."""
    return ProjectService(project_repo, linking_service, session)


def get_project_query_service(
    project_repo: ProjectRepo, name_repo: NameRepo
) -> ProjectQueryService:
    """Get read-only project query service."""
    return ProjectQueryService(project_repo, name_repo)


NameServiceDep = Annotated[NameService, Depends(get_name_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
ProjectQueryServiceDep = Annotated[ProjectQueryService, Depends(get_project_query_service)]
