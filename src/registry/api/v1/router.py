from fastapi import APIRouter

from src.registry.api.v1 import names, projects

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(names.router)
api_router.include_router(projects.router)
