"""FastAPI dependency injection definitions.

Re-exports all dependencies.
"""

# Database
from src.registry.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.registry.api.dependencies.repositories import (
    NameRepo,
    ProjectRepo,
    get_name_repository,
    get_project_repository,
)

# Services
from src.registry.api.dependencies.services import (
    NameServiceDep,
    ProjectQueryServiceDep,
    ProjectServiceDep,
    get_linking_service,
    get_name_service,
    get_project_query_service,
    get_project_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "NameRepo",
    "ProjectRepo",
    "get_name_repository",
    "get_project_repository",
    # Services
    "NameServiceDep",
    "ProjectQueryServiceDep",
    "ProjectServiceDep",
    "get_linking_service",
    "get_name_service",
    "get_project_query_service",
    "get_project_service",
]
