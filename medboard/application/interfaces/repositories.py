"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports. Managers
receive these as constructor arguments, so tests substitute in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from medboard.application.dtos.auth import (
        PasswordResetTokenRecord,
        RefreshTokenRecord,
        TokenStats,
    )
    from medboard.application.dtos.user import (
        DoctorProfileResult,
        HospitalProfileResult,
        NewDoctorProfile,
        NewHospitalProfile,
        NewUser,
        ProfileResult,
        UserRecord,
    )


# Credential store
class ICredentialStore(Protocol):
    """Protocol for user records and role profiles."""

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        """Return the user whose email matches case-insensitively (email already normalized)."""

    async def get_user_by_id(self, user_id: str) -> UserRecord | None:
        """Return user by ID."""

    async def touch_last_login(self, user_id: str, at: datetime) -> datetime | None:
        """Set last_login to at; return the previous value (None on first login)."""

    async def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Replace the password hash; return False when the user does not exist."""

    async def create_user(self, data: NewUser) -> UserRecord:
        """Insert a user. Raises EmailAlreadyRegisteredException on duplicate email."""

    async def create_doctor_profile(
        self, user_id: str, data: NewDoctorProfile
    ) -> DoctorProfileResult:
        """Insert the doctor profile of user_id."""

    async def create_hospital_profile(
        self, user_id: str, email: str, data: NewHospitalProfile
    ) -> HospitalProfileResult:
        """Insert the hospital profile of user_id."""

    async def get_profile_by_user_id(self, user_id: str, role: str) -> ProfileResult | None:
        """Return the role profile (doctor/hospital) or None (admins have none)."""


# Refresh token ledger
class IRefreshTokenLedger(Protocol):
    """Protocol for persisted refresh-token records (hash only)."""

    async def add(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> RefreshTokenRecord:
        """Persist a new record."""

    async def find_by_hash(self, token_hash: str) -> RefreshTokenRecord | None:
        """Return the record with this token hash, expired or not."""

    async def delete(self, record_id: str) -> bool:
        """Delete one record by ID; return whether it existed."""

    async def delete_by_hash(self, token_hash: str) -> int:
        """Delete records with this hash; return count."""

    async def delete_for_user(self, user_id: str) -> int:
        """Delete every record of the user; return count (0 is fine)."""

    async def delete_expired(self, now: datetime) -> int:
        """Delete records with expires_at < now; return count."""

    async def stats(self, now: datetime) -> TokenStats:
        """Return total / active / expired counts."""


# Password reset token store
class IPasswordResetTokenStore(Protocol):
    """Protocol for one-time password reset tokens (hash only)."""

    async def delete_unused_for_user(self, user_id: str) -> int:
        """Delete tokens of user with used_at IS NULL; return count."""

    async def add(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> PasswordResetTokenRecord:
        """Persist a new reset token."""

    async def find_by_hash(self, token_hash: str) -> PasswordResetTokenRecord | None:
        """Return the token with this hash (used or not, expired or not)."""

    async def mark_used(self, token_id: str, at: datetime) -> bool:
        """Set used_at if still unused; return False when another request already redeemed it."""


# Transactions
class ITransactionManager(Protocol):
    """Protocol for all-or-nothing multi-step writes."""

    def atomic(self, operation: str = "write") -> AbstractAsyncContextManager[None]:
        """Return an async context manager; an exception inside rolls every write back.

        Storage failures surface as InternalStorageException.
        """

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the enclosing transaction commits; drop it on rollback.

        Runs it immediately when no transaction is open.
        """
