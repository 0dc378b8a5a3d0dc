"""Application DTOs (no ORM dependency)."""

from medboard.application.dtos.auth import (
    AccessTokenClaims,
    LoginResult,
    PasswordResetTokenRecord,
    RefreshResult,
    RefreshTokenClaims,
    RefreshTokenRecord,
    SecurityEvent,
    TokenPair,
    TokenStats,
)
from medboard.application.dtos.user import (
    AccountResult,
    DoctorProfileResult,
    HospitalProfileResult,
    NewDoctorProfile,
    NewHospitalProfile,
    NewUser,
    ProfileResult,
    RegistrationResult,
    UserRecord,
)

__all__ = [
    "AccessTokenClaims",
    "AccountResult",
    "DoctorProfileResult",
    "HospitalProfileResult",
    "LoginResult",
    "NewDoctorProfile",
    "NewHospitalProfile",
    "NewUser",
    "PasswordResetTokenRecord",
    "ProfileResult",
    "RefreshResult",
    "RefreshTokenClaims",
    "RefreshTokenRecord",
    "RegistrationResult",
    "SecurityEvent",
    "TokenPair",
    "TokenStats",
    "UserRecord",
]
