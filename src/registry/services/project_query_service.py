"""Read-side project views: name resolution, search, sort and stats."""

from collections.abc import Sequence
from uuid import UUID

from src.registry.core.config import get_settings
from src.registry.models import Name, Project, ProjectStatus, SortField, SortOrder
from src.registry.repositories import NameRepository, ProjectRepository
from src.registry.schemas.project import ProjectRead, ProjectStats


def build_display_name(
    name: str | None,
    considering_names: Sequence[str],
    description: str | None,
    max_length: int = 64,
) -> str | None:
    """Pick the label shown for a project in lists."""
    if name:
        return name
    if considering_names:
        return considering_names[0]
    if description:
        if len(description) > max_length:
            return description[:max_length].rstrip() + "…"
        return description
    return None


def matches_search(view: ProjectRead, search: str) -> bool:
    """Case-insensitive substring match on resolved names and description."""
    needle = search.casefold()
    haystack = [view.name, *view.considering_names, view.description]
    return any(needle in value.casefold() for value in haystack if value)


def sort_views(
    views: list[ProjectRead], sort_by: SortField, sort_order: SortOrder
) -> list[ProjectRead]:
    reverse = sort_order is SortOrder.DESC
    if sort_by is SortField.NAME:
        return sorted(views, key=lambda v: (v.name or "").casefold(), reverse=reverse)
    return sorted(views, key=lambda v: getattr(v, sort_by.value), reverse=reverse)


class ProjectQueryService:
    """Enriches projects with resolved name text. No writes."""

    def __init__(self, project_repo: ProjectRepository, name_repo: NameRepository):
        self.project_repo = project_repo
        self.name_repo = name_repo

    async def list_projects(
        self,
        status: ProjectStatus | None = None,
        search: str | None = None,
        sort_by: SortField = SortField.UPDATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> list[ProjectRead]:
        """List enriched projects filtered by status and search text."""
        projects = await self.project_repo.list_all(status)
        views = await self._enrich(projects)
        if search and search.strip():
            views = [view for view in views if matches_search(view, search.strip())]
        return sort_views(views, sort_by, sort_order)

    async def get_project(self, project_id: UUID) -> ProjectRead | None:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            return None
        views = await self._enrich([project])
        return views[0]

    async def get_project_stats(self) -> ProjectStats:
        """Count projects per status, with a zero entry for empty statuses."""
        counts = await self.project_repo.count_by_status()
        by_status = {status.value: counts.get(status.value, 0) for status in ProjectStatus}
        return ProjectStats(total=sum(by_status.values()), by_status=by_status)

    async def _enrich(self, projects: Sequence[Project]) -> list[ProjectRead]:
        """Resolve name ids for all projects with one lookup per table."""
        considering_map = await self.project_repo.get_considering_map([p.id for p in projects])
        name_ids: set[UUID] = {p.name_id for p in projects if p.name_id is not None}
        for ids in considering_map.values():
            name_ids.update(ids)
        names = await self.name_repo.get_many(name_ids)
        max_length = get_settings().display_name_max_length
        return [
            self._to_view(project, considering_map[project.id], names, max_length)
            for project in projects
        ]

    @staticmethod
    def _to_view(
        project: Project,
        considering_ids: list[UUID],
        names: dict[UUID, Name],
        max_length: int,
    ) -> ProjectRead:
        assigned = names.get(project.name_id) if project.name_id is not None else None
        name_text = assigned.text if assigned is not None else None
        considering_names = [names[i].text for i in considering_ids if i in names]
        return ProjectRead(
            id=project.id,
            status=project.status_enum,
            name_id=project.name_id,
            name=name_text,
            considering_name_ids=considering_ids,
            considering_names=considering_names,
            display_name=build_display_name(
                name_text, considering_names, project.description, max_length
            ),
            description=project.description,
            repo_ref=project.repo_ref,
            deploy_url=project.deploy_url,
            tags=list(project.tags or []),
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
