"""API middleware and auth dependencies."""

from gatehouse.entrypoints.api.middleware.jwt_auth import (
    RequireAdmin,
    RequireSession,
    SessionContext,
    require_admin,
    require_session,
)

__all__ = [
    "RequireAdmin",
    "RequireSession",
    "SessionContext",
    "require_admin",
    "require_session",
]
