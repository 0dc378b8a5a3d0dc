"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from medboard.application.dtos.user import (
    DoctorProfileResult,
    HospitalProfileResult,
    ProfileResult,
    UserRecord,
)


class UserResponse(BaseModel):
    """User response (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: str
    is_active: bool
    is_approved: bool
    last_login: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls.model_validate(user)


class ProfileResponse(BaseModel):
    """Summary of the role profile (doctor name or hospital institution)."""

    id: str
    kind: str
    name: str

    @classmethod
    def from_result(cls, profile: ProfileResult | None) -> "ProfileResponse | None":
        if isinstance(profile, DoctorProfileResult):
            return cls(id=profile.id, kind="doctor", name=profile.display_name)
        if isinstance(profile, HospitalProfileResult):
            return cls(id=profile.id, kind="hospital", name=profile.display_name)
        return None


class MeResponse(BaseModel):
    user: UserResponse
    profile: ProfileResponse | None = None
