"""DTOs for users and role profiles (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class UserRecord:
    """User as read from the credential store.

    password_hash is excluded from repr so the record can be logged safely.
    """

    id: str
    email: str
    role: str
    is_active: bool
    is_approved: bool
    password_hash: str = field(repr=False)
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NewUser:
    """Values for creating a user (email already normalized, password already hashed)."""

    email: str
    password_hash: str = field(repr=False)
    role: str
    is_active: bool = True
    is_approved: bool = False


@dataclass(frozen=True)
class NewDoctorProfile:
    first_name: str
    last_name: str
    title: str | None = None
    specialty_id: int | None = None
    subspecialty_id: int | None = None
    profile_photo: str | None = None


@dataclass(frozen=True)
class NewHospitalProfile:
    institution_name: str
    phone: str
    city_id: int | None = None
    address: str | None = None
    website: str | None = None
    about: str | None = None
    logo: str | None = None


@dataclass(frozen=True)
class DoctorProfileResult:
    id: str
    user_id: str
    first_name: str
    last_name: str
    title: str | None = None
    specialty_id: int | None = None
    subspecialty_id: int | None = None
    profile_photo: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class HospitalProfileResult:
    id: str
    user_id: str
    institution_name: str
    phone: str
    email: str
    city_id: int | None = None
    address: str | None = None
    website: str | None = None
    about: str | None = None
    logo: str | None = None

    @property
    def display_name(self) -> str:
        return self.institution_name


ProfileResult = DoctorProfileResult | HospitalProfileResult


@dataclass(frozen=True)
class AccountResult:
    """User plus role profile (None for admins or when no profile row exists)."""

    user: UserRecord
    profile: ProfileResult | None


@dataclass(frozen=True)
class RegistrationResult:
    user: UserRecord
    profile: ProfileResult
