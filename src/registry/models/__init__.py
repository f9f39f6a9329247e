"""Model exports.

Import from here: `from src.registry.models import Name, Project`
"""

from src.registry.models.enums import NameStatus, ProjectStatus, SortField, SortOrder
from src.registry.models.name import Name
from src.registry.models.project import Project, ProjectConsideringName

__all__ = [
    # Enums
    "NameStatus",
    "ProjectStatus",
    "SortField",
    "SortOrder",
    # Models
    "Name",
    "Project",
    "ProjectConsideringName",
]
