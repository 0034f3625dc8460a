"""Auth API: login with single-session enforcement, session probes, profile,
password change, avatar, and OTP password reset.

Uses only injected services; no manual repo construction.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.api.v1.dependencies import (
    CurrentUser,
    get_bearer_token,
    get_password_reset_service,
    get_profile_service,
    get_session_service,
    get_storage,
)
from app.api.v1.endpoints._responses import (
    session_response,
    unit_response,
    user_response,
)
from app.application.dtos.session import DeviceContext
from app.application.interfaces.services import IStorageService
from app.application.services import (
    PasswordResetService,
    ProfileService,
    SessionService,
)
from app.core.config import get_settings
from app.core.limiter import (
    limit_auth,
    limit_check_session,
    limit_reset,
    limit_reset_request,
    limit_reset_verify,
    limit_writes,
)
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    PasswordResetVerifyRequest,
    ProfileUpdateRequest,
    SessionCheckResponse,
    TokenResponse,
)
from app.schemas.common import DataResponse, ErrorResponse, MessageResponse
from app.schemas.user import ProfileResponse, UserResponse

router = APIRouter()

Sessions = Annotated[SessionService, Depends(get_session_service)]
Profiles = Annotated[ProfileService, Depends(get_profile_service)]
PasswordResets = Annotated[PasswordResetService, Depends(get_password_reset_service)]
Storage = Annotated[IStorageService, Depends(get_storage)]

DEFAULT_DEVICE_NAME = "Unknown device"


def _device_context(request: Request, device_name: str | None) -> DeviceContext:
    return DeviceContext(
        device_name=device_name or DEFAULT_DEVICE_NAME,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


# ---- session ----


@router.post(
    "/login",
    response_model=DataResponse[LoginResponse],
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"description": "Another device holds the session; retry with force_logout"},
    },
)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    sessions: Sessions,
    storage: Storage,
):
    """Authenticate with email (or username) and password; return a bearer token.

    If the account already has a session on another device the response is
    409 with requires_force_logout and that device's details, unless
    force_logout is true, in which case the other session is ended.
    """
    result = await sessions.login(
        identifier=body.email,
        password=body.password,
        force_logout=body.force_logout,
        device=_device_context(request, body.device_name),
    )
    return DataResponse(
        message="Login successful.",
        data=LoginResponse(
            token=result.token.token,
            token_type=result.token.token_type,
            expires_in=result.token.expires_in,
            user=user_response(result.user, storage),
            session=session_response(result.session),
        ),
    )


@router.post("/check-session", response_model=DataResponse[SessionCheckResponse])
@limit_check_session
async def check_session(
    request: Request,
    token: Annotated[str | None, Depends(get_bearer_token)],
    sessions: Sessions,
    storage: Storage,
):
    """Report whether the presented token still owns a live session. Read-only."""
    result = await sessions.check_session(token)
    return DataResponse(
        message="Session is active." if result.valid else "Session is not active.",
        data=SessionCheckResponse(
            valid=result.valid,
            user=user_response(result.user, storage) if result.user else None,
            session=session_response(result.session) if result.session else None,
        ),
    )


@router.get("/me", response_model=DataResponse[ProfileResponse])
async def get_me(
    current_user: CurrentUser,
    profiles: Profiles,
    storage: Storage,
):
    """Return the current user and its unit. Requires Authorization: Bearer <token>."""
    user, unit = await profiles.get_profile(current_user.id)
    return DataResponse(
        data=ProfileResponse(
            **user_response(user, storage).model_dump(),
            unit=unit_response(unit) if unit else None,
        )
    )


@router.post("/refresh", response_model=DataResponse[TokenResponse])
@limit_writes
async def refresh_token(
    request: Request,
    current_user: CurrentUser,
    sessions: Sessions,
):
    """Swap the current token for a new one on the same session."""
    token = await sessions.refresh(current_user)
    return DataResponse(
        message="Token refreshed.",
        data=TokenResponse(
            token=token.token,
            token_type=token.token_type,
            expires_in=token.expires_in,
        ),
    )


@router.post("/logout", response_model=MessageResponse)
@limit_writes
async def logout(
    request: Request,
    current_user: CurrentUser,
    sessions: Sessions,
):
    """End the current session; the token stops working immediately."""
    await sessions.logout(current_user)
    return MessageResponse(message="Logged out.")


# ---- profile ----


@router.put("/profile", response_model=DataResponse[UserResponse])
@limit_writes
async def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    current_user: CurrentUser,
    profiles: Profiles,
    storage: Storage,
):
    """Update the current user's name, email and phone."""
    user = await profiles.update_profile(
        current_user.id, body.model_dump(exclude_unset=True)
    )
    return DataResponse(message="Profile updated.", data=user_response(user, storage))


@router.put("/change-password", response_model=MessageResponse)
@limit_writes
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    current_user: CurrentUser,
    profiles: Profiles,
):
    """Change the current user's password after checking the current one."""
    await profiles.change_password(
        current_user.id, body.current_password, body.new_password
    )
    return MessageResponse(message="Password changed.")


@router.post("/avatar", response_model=DataResponse[UserResponse])
@limit_writes
async def upload_avatar(
    request: Request,
    current_user: CurrentUser,
    profiles: Profiles,
    storage: Storage,
    avatar: Annotated[UploadFile, File(description="JPEG, PNG or GIF image")],
):
    """Upload (or replace) the current user's avatar."""
    # One byte past the limit is enough for the size check.
    data = await avatar.read(get_settings().avatar_max_bytes + 1)
    user = await profiles.upload_avatar(current_user.id, data)
    return DataResponse(message="Avatar uploaded.", data=user_response(user, storage))


@router.delete("/avatar", response_model=DataResponse[UserResponse])
@limit_writes
async def delete_avatar(
    request: Request,
    current_user: CurrentUser,
    profiles: Profiles,
    storage: Storage,
):
    """Remove the current user's avatar. Succeeds when none is set."""
    user = await profiles.delete_avatar(current_user.id)
    return DataResponse(message="Avatar deleted.", data=user_response(user, storage))


# ---- password reset ----


@router.post("/password/reset/request", response_model=MessageResponse)
@limit_reset_request
async def request_password_reset(
    request: Request,
    body: PasswordResetRequest,
    resets: PasswordResets,
):
    """Email a one-time code to a registered address."""
    await resets.request(body.email)
    return MessageResponse(message="An OTP code has been sent to your email.")


@router.post("/password/reset/verify", response_model=MessageResponse)
@limit_reset_verify
async def verify_password_reset(
    request: Request,
    body: PasswordResetVerifyRequest,
    resets: PasswordResets,
):
    """Check the one-time code; a verified code unlocks the reset step."""
    await resets.verify(body.email, body.otp)
    return MessageResponse(message="OTP verified.")


@router.post("/password/reset", response_model=MessageResponse)
@limit_reset
async def reset_password(
    request: Request,
    body: PasswordResetConfirmRequest,
    resets: PasswordResets,
):
    """Set a new password with a verified code. Ends any active session."""
    await resets.reset(body.email, body.otp, body.password)
    return MessageResponse(message="Password has been reset. Please log in.")
