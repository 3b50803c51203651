"""Session token authentication dependencies."""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gatehouse.core.auth.guard import AccessGuard
from gatehouse.core.auth.types import Account
from gatehouse.core.exceptions import Forbidden, Unauthorized
from gatehouse.entrypoints.api.deps import get_access_guard

logger = structlog.get_logger()

# Use Bearer token authentication
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class SessionContext:
    """Context from a verified session token."""

    account_id: UUID


async def require_session(
    request: Request,
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
) -> SessionContext:
    """Verify the session token and return the caller's account id.

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid.
    """
    token = credentials.credentials if credentials else None
    try:
        account_id = guard.authenticate(token)
    except Unauthorized as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    context = SessionContext(account_id=account_id)

    # Store in request state for downstream use
    request.state.session = context
    return context


async def require_admin(
    request: Request,
    auth: Annotated[SessionContext, Depends(require_session)],
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> Account:
    """Require an authenticated admin account.

    Raises:
        HTTPException: 401 without a valid session, 403 for non-admins.
    """
    try:
        account = await guard.require_role(auth.account_id)
    except Forbidden as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from None

    request.state.profile = account
    return account


# Common dependencies for convenience
RequireSession = Annotated[SessionContext, Depends(require_session)]
RequireAdmin = Annotated[Account, Depends(require_admin)]
