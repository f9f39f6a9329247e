"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.registry.api.dependencies.db import DBSession
from src.registry.repositories import NameRepository, ProjectRepository


def get_name_repository(session: DBSession) -> NameRepository:
    """Get name repository."""
    return NameRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    """Get project repository."""
    return ProjectRepository(session)


NameRepo = Annotated[NameRepository, Depends(get_name_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
