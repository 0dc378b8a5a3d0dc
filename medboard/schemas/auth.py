"""Auth API schemas."""

from pydantic import BaseModel, EmailStr, Field

from medboard.schemas.user import ProfileResponse, UserResponse


class LoginRequest(BaseModel):
    """Request body for login. Email is matched case-insensitively after trimming."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class RegisterDoctorRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    title: str | None = Field(default=None, max_length=100)
    specialty_id: int | None = None
    subspecialty_id: int | None = None
    profile_photo: str | None = Field(default=None, max_length=500)


class RegisterHospitalRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    institution_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    city_id: int | None = None
    address: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=255)
    about: str | None = None
    logo: str | None = Field(default=None, max_length=500)


class RefreshTokenRequest(BaseModel):
    """Request body for POST /auth/refresh and POST /auth/logout."""

    refresh_token: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    """Any string is accepted; the response never reveals whether the account exists."""

    email: str = Field(default="", max_length=255)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Token from the reset link")
    password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class LoginResponse(BaseModel):
    """Tokens plus the authenticated user."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
    profile: ProfileResponse | None = None
    is_first_login: bool


class RefreshResponse(BaseModel):
    """New access token; refresh_token is new only when rotated is True."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    rotated: bool


class RegistrationResponse(BaseModel):
    message: str
    user: UserResponse
    profile: ProfileResponse


class MessageResponse(BaseModel):
    message: str


class LogoutAllResponse(BaseModel):
    message: str
    revoked: int = Field(..., description="Number of sessions ended")


class VerifyTokenResponse(BaseModel):
    valid: bool = True
    user_id: str
    role: str
