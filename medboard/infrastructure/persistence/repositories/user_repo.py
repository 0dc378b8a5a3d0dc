"""Credential store: users and role profiles. Interface methods return application DTOs."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from medboard.application.dtos.user import (
    DoctorProfileResult,
    HospitalProfileResult,
    NewDoctorProfile,
    NewHospitalProfile,
    NewUser,
    ProfileResult,
    UserRecord,
)
from medboard.domain.enums import UserRole
from medboard.domain.exceptions import EmailAlreadyRegisteredException
from medboard.infrastructure.persistence.models.profile import DoctorProfile, HospitalProfile
from medboard.infrastructure.persistence.models.user import User
from medboard.infrastructure.persistence.repositories.base import BaseRepository
from medboard.shared.utils.datetime import ensure_utc
from medboard.shared.utils.sanitization import normalize_email


def _user_to_record(u: User) -> UserRecord:
    """Map ORM User to application UserRecord."""
    return UserRecord(
        id=u.id,
        email=u.email,
        role=u.role,
        is_active=u.is_active,
        is_approved=u.is_approved,
        password_hash=u.hashed_password,
        last_login=ensure_utc(u.last_login),
        created_at=ensure_utc(u.created_at),
        updated_at=ensure_utc(u.updated_at),
    )


def _doctor_to_result(p: DoctorProfile) -> DoctorProfileResult:
    return DoctorProfileResult(
        id=p.id,
        user_id=p.user_id,
        first_name=p.first_name,
        last_name=p.last_name,
        title=p.title,
        specialty_id=p.specialty_id,
        subspecialty_id=p.subspecialty_id,
        profile_photo=p.profile_photo,
    )


def _hospital_to_result(p: HospitalProfile) -> HospitalProfileResult:
    return HospitalProfileResult(
        id=p.id,
        user_id=p.user_id,
        institution_name=p.institution_name,
        phone=p.phone,
        email=p.email,
        city_id=p.city_id,
        address=p.address,
        website=p.website,
        about=p.about,
        logo=p.logo,
    )


class UserRepository(BaseRepository[User]):
    """ICredentialStore backed by Postgres."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        normalized = normalize_email(email)
        if not normalized:
            return None
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == normalized)
        )
        user = result.scalar_one_or_none()
        return _user_to_record(user) if user else None

    async def get_user_by_id(self, user_id: str) -> UserRecord | None:
        user = await self._get(user_id)
        return _user_to_record(user) if user else None

    async def touch_last_login(self, user_id: str, at: datetime) -> datetime | None:
        user = await self._get(user_id)
        if user is None:
            return None
        previous = ensure_utc(user.last_login)
        user.last_login = at
        await self.db.flush()
        return previous

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        user = await self._get(user_id)
        if user is None:
            return False
        user.hashed_password = password_hash
        await self.db.flush()
        return True

    async def create_user(self, data: NewUser) -> UserRecord:
        """Create user; raise EmailAlreadyRegisteredException on unique constraint violation."""
        user = User(
            email=normalize_email(data.email),
            hashed_password=data.password_hash,
            role=data.role,
            is_active=data.is_active,
            is_approved=data.is_approved,
        )
        try:
            created = await self._create(user)
        except IntegrityError as e:
            raise EmailAlreadyRegisteredException() from e
        return _user_to_record(created)

    async def create_doctor_profile(
        self, user_id: str, data: NewDoctorProfile
    ) -> DoctorProfileResult:
        profile = DoctorProfile(
            user_id=user_id,
            first_name=data.first_name,
            last_name=data.last_name,
            title=data.title,
            specialty_id=data.specialty_id,
            subspecialty_id=data.subspecialty_id,
            profile_photo=data.profile_photo,
        )
        self.db.add(profile)
        await self.db.flush()
        return _doctor_to_result(profile)

    async def create_hospital_profile(
        self, user_id: str, email: str, data: NewHospitalProfile
    ) -> HospitalProfileResult:
        profile = HospitalProfile(
            user_id=user_id,
            email=email,
            institution_name=data.institution_name,
            phone=data.phone,
            city_id=data.city_id,
            address=data.address,
            website=data.website,
            about=data.about,
            logo=data.logo,
        )
        self.db.add(profile)
        await self.db.flush()
        return _hospital_to_result(profile)

    async def get_profile_by_user_id(self, user_id: str, role: str) -> ProfileResult | None:
        if role == UserRole.DOCTOR.value:
            result = await self.db.execute(
                select(DoctorProfile).where(DoctorProfile.user_id == user_id)
            )
            doctor = result.scalar_one_or_none()
            return _doctor_to_result(doctor) if doctor else None
        if role == UserRole.HOSPITAL.value:
            result = await self.db.execute(
                select(HospitalProfile).where(HospitalProfile.user_id == user_id)
            )
            hospital = result.scalar_one_or_none()
            return _hospital_to_result(hospital) if hospital else None
        return None
