"""Auth API: registration, login, token refresh, logout, password reset and current user.

Routes only translate HTTP to the auth services; every rule lives in the
services. Domain exceptions become JSON errors in core.exception_handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from medboard.api.v1.dependencies import (
    CurrentUser,
    get_password_change_service,
    get_password_reset_manager,
    get_registration_service,
    get_session_manager,
)
from medboard.application.dtos.user import NewDoctorProfile, NewHospitalProfile
from medboard.application.services import (
    PasswordChangeService,
    PasswordResetManager,
    RegistrationService,
    SessionLifecycleManager,
)
from medboard.core.limiter import (
    limit_login,
    limit_password_reset,
    limit_refresh,
    limit_register,
)
from medboard.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    LogoutAllResponse,
    MessageResponse,
    RefreshResponse,
    RefreshTokenRequest,
    RegisterDoctorRequest,
    RegisterHospitalRequest,
    RegistrationResponse,
    ResetPasswordRequest,
    VerifyTokenResponse,
)
from medboard.schemas.user import MeResponse, ProfileResponse, UserResponse

router = APIRouter()

Sessions = Annotated[SessionLifecycleManager, Depends(get_session_manager)]

FORGOT_PASSWORD_MESSAGE = (
    "If an account exists for this email, a password reset link has been sent."
)
REGISTERED_MESSAGE = (
    "Registration successful. You can log in once an administrator approves your account."
)


def _client_meta(request: Request) -> dict[str, str | None]:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.post("/register/doctor", response_model=RegistrationResponse, status_code=201)
@limit_register
async def register_doctor(
    request: Request,
    body: RegisterDoctorRequest,
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
):
    """Register a doctor account (active, pending admin approval)."""
    result = await registration.register_doctor(
        body.email,
        body.password,
        NewDoctorProfile(
            first_name=body.first_name,
            last_name=body.last_name,
            title=body.title,
            specialty_id=body.specialty_id,
            subspecialty_id=body.subspecialty_id,
            profile_photo=body.profile_photo,
        ),
    )
    return RegistrationResponse(
        message=REGISTERED_MESSAGE,
        user=UserResponse.from_record(result.user),
        profile=ProfileResponse.from_result(result.profile),
    )


@router.post("/register/hospital", response_model=RegistrationResponse, status_code=201)
@limit_register
async def register_hospital(
    request: Request,
    body: RegisterHospitalRequest,
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
):
    """Register a hospital account (active, pending admin approval)."""
    result = await registration.register_hospital(
        body.email,
        body.password,
        NewHospitalProfile(
            institution_name=body.institution_name,
            phone=body.phone,
            city_id=body.city_id,
            address=body.address,
            website=body.website,
            about=body.about,
            logo=body.logo,
        ),
    )
    return RegistrationResponse(
        message=REGISTERED_MESSAGE,
        user=UserResponse.from_record(result.user),
        profile=ProfileResponse.from_result(result.profile),
    )


@router.post("/login", response_model=LoginResponse)
@limit_login
async def login(request: Request, body: LoginRequest, sessions: Sessions):
    """Authenticate with email and password; return access and refresh tokens."""
    result = await sessions.login(body.email, body.password, **_client_meta(request))
    return LoginResponse(
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
        token_type=result.tokens.token_type,
        user=UserResponse.from_record(result.user),
        profile=ProfileResponse.from_result(result.profile),
        is_first_login=result.is_first_login,
    )


@router.post("/refresh", response_model=RefreshResponse)
@limit_refresh
async def refresh(request: Request, body: RefreshTokenRequest, sessions: Sessions):
    """Exchange a refresh token for a new access token (rotating the refresh token when due)."""
    result = await sessions.refresh(body.refresh_token, **_client_meta(request))
    return RefreshResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        rotated=result.rotated,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(body: RefreshTokenRequest, sessions: Sessions):
    """End the session of the given refresh token. 404 if it is not known."""
    await sessions.logout(body.refresh_token)
    return MessageResponse(message="Logged out successfully")


@router.post("/logout-all", response_model=LogoutAllResponse)
async def logout_all(current_user: CurrentUser, sessions: Sessions):
    """End every session of the authenticated user."""
    revoked = await sessions.logout_all(current_user.id)
    return LogoutAllResponse(message="Logged out from all devices", revoked=revoked)


@router.post("/forgot-password", response_model=MessageResponse)
@limit_password_reset
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    resets: Annotated[PasswordResetManager, Depends(get_password_reset_manager)],
):
    """Send a reset link if the account exists. The response is identical either way."""
    await resets.request_reset(body.email, **_client_meta(request))
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limit_password_reset
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    resets: Annotated[PasswordResetManager, Depends(get_password_reset_manager)],
):
    """Set a new password with a reset token; ends every session of the user."""
    await resets.reset_password(body.token, body.password, **_client_meta(request))
    return MessageResponse(
        message="Password has been reset successfully. Please log in with your new password."
    )


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUser,
    changes: Annotated[PasswordChangeService, Depends(get_password_change_service)],
):
    """Change the password of the authenticated user; ends every session of the user."""
    await changes.change_password(current_user.id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully. Please log in again.")


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: CurrentUser, sessions: Sessions):
    """Return the authenticated user and a summary of their profile."""
    account = await sessions.get_current_account(current_user.id)
    return MeResponse(
        user=UserResponse.from_record(account.user),
        profile=ProfileResponse.from_result(account.profile),
    )


@router.post("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(current_user: CurrentUser):
    """Return 200 with the identity behind a valid access token, 401 otherwise."""
    return VerifyTokenResponse(user_id=current_user.id, role=current_user.role)
