"""API route modules."""

from fastapi import APIRouter

from gatehouse.entrypoints.api.routes.admin import router as admin_router
from gatehouse.entrypoints.api.routes.auth import router as auth_router

# Create main API router
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
