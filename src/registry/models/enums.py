"""Shared enums for models."""

from enum import Enum


class NameStatus(str, Enum):
    """Lifecycle status of a name in the pool."""

    AVAILABLE = "available"
    CONSIDERING = "considering"
    ASSIGNED = "assigned"


class ProjectStatus(str, Enum):
    """Project lifecycle stage."""

    IDEA = "idea"
    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class SortField(str, Enum):
    """Project list sort keys."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    NAME = "name"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
