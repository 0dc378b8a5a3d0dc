"""Doctor and hospital self-registration: user + role profile in one transaction."""

from __future__ import annotations

import asyncio

from medboard.application.dtos.auth import SecurityEvent
from medboard.application.dtos.user import (
    NewDoctorProfile,
    NewHospitalProfile,
    NewUser,
    RegistrationResult,
)
from medboard.application.interfaces.repositories import ICredentialStore, ITransactionManager
from medboard.application.interfaces.services import IPasswordHasher, ISecurityEventSink
from medboard.application.services.security_events import emit_security_event
from medboard.domain.enums import SecurityEventType, UserRole
from medboard.domain.exceptions import EmailAlreadyRegisteredException, ValidationException
from medboard.shared.utils.sanitization import normalize_email


class RegistrationService:
    """Creates unapproved doctor/hospital accounts. An admin approves them later."""

    def __init__(
        self,
        credential_store: ICredentialStore,
        password_hasher: IPasswordHasher,
        transactions: ITransactionManager,
        event_sink: ISecurityEventSink | None = None,
    ) -> None:
        self._credentials = credential_store
        self._hasher = password_hasher
        self._transactions = transactions
        self._event_sink = event_sink

    async def register_doctor(
        self, email: str, password: str, profile: NewDoctorProfile
    ) -> RegistrationResult:
        """Register a doctor. Raises EmailAlreadyRegisteredException on duplicate email."""
        normalized, password_hash = await self._prepare(email, password)
        async with self._transactions.atomic("register_doctor"):
            user = await self._credentials.create_user(
                NewUser(email=normalized, password_hash=password_hash, role=UserRole.DOCTOR.value)
            )
            created = await self._credentials.create_doctor_profile(user.id, profile)
        self._registered(user.id, normalized, UserRole.DOCTOR)
        return RegistrationResult(user=user, profile=created)

    async def register_hospital(
        self, email: str, password: str, profile: NewHospitalProfile
    ) -> RegistrationResult:
        """Register a hospital. Raises EmailAlreadyRegisteredException on duplicate email."""
        normalized, password_hash = await self._prepare(email, password)
        async with self._transactions.atomic("register_hospital"):
            user = await self._credentials.create_user(
                NewUser(email=normalized, password_hash=password_hash, role=UserRole.HOSPITAL.value)
            )
            created = await self._credentials.create_hospital_profile(user.id, normalized, profile)
        self._registered(user.id, normalized, UserRole.HOSPITAL)
        return RegistrationResult(user=user, profile=created)

    async def _prepare(self, email: str, password: str) -> tuple[str, str]:
        normalized = normalize_email(email)
        if not normalized:
            raise ValidationException("Email is required", field="email")
        if await self._credentials.find_user_by_email(normalized) is not None:
            raise EmailAlreadyRegisteredException()
        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        return normalized, password_hash

    def _registered(self, user_id: str, email: str, role: UserRole) -> None:
        emit_security_event(
            self._event_sink,
            SecurityEvent(
                event_type=SecurityEventType.USER_REGISTERED,
                message=f"New {role.value} registered",
                user_id=user_id,
                email=email,
            ),
        )
