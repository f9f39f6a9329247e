"""Name pool endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.registry.api.dependencies import NameServiceDep
from src.registry.models import NameStatus
from src.registry.schemas.name import NameCreate, NameRead, NameUpdate

router = APIRouter(prefix="/names", tags=["names"])


@router.get(
    "",
    response_model=list[NameRead],
    summary="List names",
    description="List pool names ordered by text, optionally filtered by status.",
)
async def list_names(
    service: NameServiceDep,
    name_status: Annotated[
        NameStatus | None, Query(alias="status", description="Filter by status")
    ] = None,
) -> list[NameRead]:
    names = await service.list_names(name_status)
    return [NameRead.model_validate(n) for n in names]


@router.get(
    "/available",
    response_model=list[NameRead],
    summary="List available names",
    description="Names not considered or assigned by any project.",
)
async def list_available_names(service: NameServiceDep) -> list[NameRead]:
    names = await service.list_available_names()
    return [NameRead.model_validate(n) for n in names]


@router.post(
    "",
    response_model=NameRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create name",
    responses={
        201: {"description": "Name added to the pool"},
        409: {"description": "A name with this text already exists"},
    },
)
async def create_name(data: NameCreate, service: NameServiceDep) -> NameRead:
    name = await service.create_name(data.text, data.notes)
    return NameRead.model_validate(name)


@router.get(
    "/{name_id}",
    response_model=NameRead,
    summary="Get name",
    responses={404: {"description": "Name not found"}},
)
async def get_name(name_id: UUID, service: NameServiceDep) -> NameRead:
    name = await service.get_name(name_id)
    return NameRead.model_validate(name)


@router.patch(
    "/{name_id}",
    response_model=NameRead,
    summary="Update name",
    description="Rename a name and/or replace its notes. Status is never writable.",
    responses={
        404: {"description": "Name not found"},
        409: {"description": "Another name already has this text"},
    },
)
async def update_name(name_id: UUID, data: NameUpdate, service: NameServiceDep) -> NameRead:
    name = await service.update_name(name_id, data.model_dump(exclude_unset=True))
    return NameRead.model_validate(name)


@router.delete(
    "/{name_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete name",
    responses={
        204: {"description": "Name deleted"},
        404: {"description": "Name not found"},
        409: {"description": "Name is assigned or considered by a project"},
    },
)
async def delete_name(name_id: UUID, service: NameServiceDep) -> None:
    await service.delete_name(name_id)
