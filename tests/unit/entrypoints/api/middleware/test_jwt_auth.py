"""Unit tests for session auth dependencies."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from gatehouse.core.exceptions import Forbidden, Unauthorized
from gatehouse.entrypoints.api.middleware.jwt_auth import (
    SessionContext,
    require_admin,
    require_session,
)


def bearer(token: str) -> HTTPAuthorizationCredentials:
    """Return bearer credentials for a token."""
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestRequireSession:
    """Tests for require_session."""

    @pytest.fixture
    def mock_request(self) -> MagicMock:
        """Return a mock request."""
        return MagicMock()

    @pytest.fixture
    def guard(self) -> MagicMock:
        """Return a mock access guard."""
        return MagicMock()

    async def test_valid_token(self, mock_request: MagicMock, guard: MagicMock) -> None:
        """Test a valid token yields the account id and sets request state."""
        account_id = uuid4()
        guard.authenticate.return_value = account_id

        result = await require_session(mock_request, guard, bearer("tok"))

        assert result == SessionContext(account_id=account_id)
        assert mock_request.state.session == result
        guard.authenticate.assert_called_once_with("tok")

    async def test_missing_credentials(self, mock_request: MagicMock, guard: MagicMock) -> None:
        """Test a missing header is passed through as None and rejected."""
        guard.authenticate.side_effect = Unauthorized()

        with pytest.raises(HTTPException) as exc_info:
            await require_session(mock_request, guard, None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
        guard.authenticate.assert_called_once_with(None)

    async def test_invalid_token(self, mock_request: MagicMock, guard: MagicMock) -> None:
        """Test a rejected token raises 401."""
        guard.authenticate.side_effect = Unauthorized("Invalid token")

        with pytest.raises(HTTPException) as exc_info:
            await require_session(mock_request, guard, bearer("bad"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token"


class TestRequireAdmin:
    """Tests for require_admin."""

    async def test_admin(self) -> None:
        """Test the admin account is returned and stored on the request."""
        request = MagicMock()
        account = MagicMock()
        guard = MagicMock()
        guard.require_role = AsyncMock(return_value=account)
        auth = SessionContext(account_id=uuid4())

        result = await require_admin(request, auth, guard)

        assert result is account
        assert request.state.profile is account
        guard.require_role.assert_awaited_once_with(auth.account_id)

    async def test_not_admin(self) -> None:
        """Test a non-admin raises 403."""
        guard = MagicMock()
        guard.require_role = AsyncMock(side_effect=Forbidden())

        with pytest.raises(HTTPException) as exc_info:
            await require_admin(MagicMock(), SessionContext(account_id=uuid4()), guard)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Admin resource. Access denied."
