from src.registry.schemas.name import NameCreate, NameRead, NameUpdate
from src.registry.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
    PromoteRequest,
)

__all__ = [
    # Name
    "NameCreate",
    "NameRead",
    "NameUpdate",
    # Project
    "ProjectCreate",
    "ProjectRead",
    "ProjectStats",
    "ProjectUpdate",
    "PromoteRequest",
]
