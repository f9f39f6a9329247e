"""Repository layer - data access abstraction."""

from src.registry.repositories.base import BaseRepository
from src.registry.repositories.name import NameRepository
from src.registry.repositories.project import ProjectRepository

__all__ = [
    "BaseRepository",
    "NameRepository",
    "ProjectRepository",
]
