"""Project endpoints.

Writes go through ``ProjectService`` (which drives the linking engine);
responses are re-read through ``ProjectQueryService`` so they carry the
resolved name text.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.registry.api.dependencies import ProjectQueryServiceDep, ProjectServiceDep
from src.registry.core.exceptions import NotFoundError
from src.registry.models import ProjectStatus, SortField, SortOrder
from src.registry.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
    PromoteRequest,
)
from src.registry.services import ProjectDraft

router = APIRouter(prefix="/projects", tags=["projects"])


async def _read_project(query_service: ProjectQueryServiceDep, project_id: UUID) -> ProjectRead:
    view = await query_service.get_project(project_id)
    if view is None:
        raise NotFoundError("project", project_id)
    return view


@router.get(
    "",
    response_model=list[ProjectRead],
    summary="List projects",
    description=(
        "List projects with resolved names. `search` matches the assigned name, "
        "considered names or description (case-insensitive)."
    ),
)
async def list_projects(
    query_service: ProjectQueryServiceDep,
    project_status: Annotated[
        ProjectStatus | None, Query(alias="status", description="Filter by status")
    ] = None,
    search: Annotated[str | None, Query(max_length=200, description="Search text")] = None,
    sort_by: Annotated[SortField, Query(description="Sort key")] = SortField.UPDATED_AT,
    sort_order: Annotated[SortOrder, Query(description="Sort direction")] = SortOrder.DESC,
) -> list[ProjectRead]:
    return await query_service.list_projects(project_status, search, sort_by, sort_order)


@router.get(
    "/stats",
    response_model=ProjectStats,
    summary="Project stats",
    description="Total project count and a count for every status.",
)
async def get_project_stats(query_service: ProjectQueryServiceDep) -> ProjectStats:
    return await query_service.get_project_stats()


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(project_id: UUID, query_service: ProjectQueryServiceDep) -> ProjectRead:
    return await _read_project(query_service, project_id)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created and names linked"},
        404: {"description": "A referenced name does not exist"},
        409: {"description": "A referenced name is assigned to another project"},
        422: {"description": "Business rule violated"},
    },
)
async def create_project(
    data: ProjectCreate,
    service: ProjectServiceDep,
    query_service: ProjectQueryServiceDep,
) -> ProjectRead:
    draft = ProjectDraft(status=data.status).merge(data.model_dump())
    project = await service.create_project(draft)
    return await _read_project(query_service, project.id)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    description="Partial update. Omitted fields keep their value; `null` clears a field.",
    responses={
        404: {"description": "Project or referenced name not found"},
        409: {"description": "A referenced name is assigned to another project"},
        422: {"description": "Business rule violated"},
    },
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    service: ProjectServiceDep,
    query_service: ProjectQueryServiceDep,
) -> ProjectRead:
    await service.update_project(project_id, data.to_changes())
    return await _read_project(query_service, project_id)


@router.post(
    "/{project_id}/promote",
    response_model=ProjectRead,
    summary="Promote idea",
    description="Make an idea active, taking one of its considered names.",
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Project is not an idea, or the name is assigned elsewhere"},
        422: {"description": "The idea does not consider this name"},
    },
)
async def promote_idea(
    project_id: UUID,
    data: PromoteRequest,
    service: ProjectServiceDep,
    query_service: ProjectQueryServiceDep,
) -> ProjectRead:
    await service.promote_idea(project_id, data.name_id)
    return await _read_project(query_service, project_id)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    responses={
        204: {"description": "Project deleted and its names released"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID,
    service: ProjectServiceDep,
    release_names_to_pool: Annotated[
        bool,
        Query(description="Release the assigned name to the pool instead of keeping it warm"),
    ] = True,
) -> None:
    await service.delete_project(project_id, release_names_to_pool)
