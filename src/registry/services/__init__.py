"""Service layer - business logic."""

from src.registry.services.linking_service import LinkingService, LinkState
from src.registry.services.name_service import NameService
from src.registry.services.project_query_service import ProjectQueryService
from src.registry.services.project_service import (
    ProjectDraft,
    ProjectService,
    validate_project_rules,
)

__all__ = [
    "LinkingService",
    "LinkState",
    "NameService",
    "ProjectDraft",
    "ProjectQueryService",
    "ProjectService",
    "validate_project_rules",
]
