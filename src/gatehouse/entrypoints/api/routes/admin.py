"""Admin-only API routes."""

from fastapi import APIRouter

from gatehouse.core.auth.types import PublicAccount
from gatehouse.entrypoints.api.middleware.jwt_auth import RequireAdmin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/me", response_model=PublicAccount)
async def get_admin_account(admin: RequireAdmin) -> PublicAccount:
    """Return the calling admin's public account."""
    return admin.to_public()
