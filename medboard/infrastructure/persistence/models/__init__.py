"""Persistence models: ORM entities and mixins."""

from medboard.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    Model,
    TimestampMixin,
)
from medboard.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from medboard.infrastructure.persistence.models.profile import (
    DoctorProfile,
    HospitalProfile,
)
from medboard.infrastructure.persistence.models.refresh_token import RefreshToken
from medboard.infrastructure.persistence.models.user import User

__all__ = [
    "User",
    "DoctorProfile",
    "HospitalProfile",
    "RefreshToken",
    "PasswordResetToken",
    "CuidMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    "Model",
]
