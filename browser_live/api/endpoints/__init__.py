"""API endpoints"""

from fastapi import APIRouter

from .system import router as system_router
from .tasks import router as tasks_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(tasks_router)

__all__ = ["api_router"]
