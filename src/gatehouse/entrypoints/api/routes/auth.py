"""Auth API routes for registration, sign-in, password reset and federated login."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from gatehouse.core.auth.federated import FederatedIdentityResolver
from gatehouse.core.auth.registration import RegistrationService
from gatehouse.core.auth.reset import PasswordResetService
from gatehouse.core.auth.session import SessionIssuer
from gatehouse.core.auth.types import PublicAccount
from gatehouse.core.exceptions import ExpiredOrInvalid, GatehouseError
from gatehouse.entrypoints.api.deps import (
    get_federated_resolver,
    get_password_reset_service,
    get_registration_service,
    get_session_issuer,
)
from gatehouse.entrypoints.api.middleware.jwt_auth import RequireSession

router = APIRouter(prefix="/auth", tags=["auth"])


# Request/Response models
class RegisterRequest(BaseModel):
    """Registration request body.

    The email is validated by the registration flow and kept exactly as typed.
    """

    name: str
    email: str
    password: str


class ActivationRequest(BaseModel):
    """Account activation request body."""

    token: str


class SigninRequest(BaseModel):
    """Sign-in request body."""

    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    """Password reset request body."""

    email: str


class ResetPasswordRequest(BaseModel):
    """Password reset confirmation body."""

    resetPasswordLink: str  # noqa: N815
    newPassword: str  # noqa: N815


class GoogleLoginRequest(BaseModel):
    """Google Sign-In payload."""

    idToken: str  # noqa: N815


class FacebookLoginRequest(BaseModel):
    """Facebook Login payload."""

    userID: str  # noqa: N815
    accessToken: str  # noqa: N815


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


class ActivationResponse(BaseModel):
    """Activation response."""

    success: bool
    message: str


class SessionResponse(BaseModel):
    """Session token with the public account projection."""

    token: str
    user: PublicAccount


def _http_error(e: GatehouseError, status_code: int | None = None) -> HTTPException:
    return HTTPException(status_code=status_code or e.status_code, detail=e.message)


@router.post("/register", response_model=MessageResponse)
async def register(
    body: RegisterRequest,
    service: Annotated[RegistrationService, Depends(get_registration_service)],
) -> MessageResponse:
    """Start registration by emailing an activation link.

    Args:
        body: Name, email and password.
        service: Registration flow.

    Returns:
        Confirmation that the email was sent.
    """
    try:
        message = await service.start_registration(body.name, body.email, body.password)
    except GatehouseError as e:
        raise _http_error(e) from None
    return MessageResponse(message=message)


@router.post("/activation", response_model=ActivationResponse)
async def activate(
    body: ActivationRequest,
    service: Annotated[RegistrationService, Depends(get_registration_service)],
) -> ActivationResponse:
    """Complete registration from an activation token.

    An expired or invalid link answers 401.
    """
    try:
        await service.complete_registration(body.token)
    except ExpiredOrInvalid as e:
        raise _http_error(e, status_code=401) from None
    except GatehouseError as e:
        raise _http_error(e) from None
    return ActivationResponse(success=True, message="Signup success")


@router.post("/signin", response_model=SessionResponse)
async def signin(
    body: SigninRequest,
    service: Annotated[SessionIssuer, Depends(get_session_issuer)],
) -> SessionResponse:
    """Sign in with email and password."""
    try:
        result = await service.sign_in(body.email, body.password)
    except GatehouseError as e:
        raise _http_error(e) from None
    return SessionResponse(token=result.token, user=result.user)


@router.put("/forgotpassword", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    """Email a single-use password reset link."""
    try:
        message = await service.request_reset(body.email)
    except GatehouseError as e:
        raise _http_error(e) from None
    return MessageResponse(message=message)


@router.put("/resetpassword", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    """Set a new password using a reset token."""
    try:
        message = await service.complete_reset(body.resetPasswordLink, body.newPassword)
    except GatehouseError as e:
        raise _http_error(e) from None
    return MessageResponse(message=message)


async def _federated_sign_in(
    resolver: FederatedIdentityResolver,
    provider: str,
    payload: dict[str, Any],
) -> SessionResponse:
    try:
        result = await resolver.sign_in_with_assertion(provider, payload)
    except GatehouseError as e:
        # Every federated failure is reported as a failed login
        raise _http_error(e, status_code=400) from None
    return SessionResponse(token=result.token, user=result.user)


@router.post("/googlelogin", response_model=SessionResponse)
async def google_login(
    body: GoogleLoginRequest,
    resolver: Annotated[FederatedIdentityResolver, Depends(get_federated_resolver)],
) -> SessionResponse:
    """Sign in with a Google ID token."""
    return await _federated_sign_in(resolver, "google", body.model_dump())


@router.post("/facebooklogin", response_model=SessionResponse)
async def facebook_login(
    body: FacebookLoginRequest,
    resolver: Annotated[FederatedIdentityResolver, Depends(get_federated_resolver)],
) -> SessionResponse:
    """Sign in with a Facebook access token."""
    return await _federated_sign_in(resolver, "facebook", body.model_dump())


@router.get("/me")
async def get_current_account(auth: RequireSession) -> dict[str, UUID]:
    """Return the account id behind the session token."""
    return {"account_id": auth.account_id}
