"""Service interfaces (ports) for the application layer.

Protocols define contracts for security primitives and outbound side effects (DIP).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from medboard.application.dtos.auth import (
        AccessTokenClaims,
        RefreshTokenClaims,
        RefreshTokenRecord,
        SecurityEvent,
    )
    from medboard.application.interfaces.repositories import IRefreshTokenLedger


# Password hashing (blocking; callers run it via asyncio.to_thread)
class IPasswordHasher(Protocol):
    """Protocol for one-way salted password hashing."""

    def hash(self, password: str) -> str:
        """Return a salted hash of password."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash. Never raises on malformed hashes."""


# Token codec
class ITokenCodec(Protocol):
    """Protocol for minting and verifying access/refresh tokens."""

    def mint_access_token(self, claims: AccessTokenClaims) -> str:
        """Sign a short-lived access token carrying id, role, approval and active flags."""

    def mint_refresh_token(self, user_id: str) -> str:
        """Sign a longer-lived refresh token carrying only the user id."""

    def decode_access_token(self, token: str) -> AccessTokenClaims:
        """Verify an access token. Raises InvalidTokenException."""

    def decode_refresh_token(self, token: str) -> RefreshTokenClaims:
        """Verify a refresh token's signature and expiry. Raises InvalidTokenException."""

    def hash_token(self, token: str) -> str:
        """Deterministic keyed hash used to store and look up tokens."""

    async def verify_refresh_token_record(
        self, token: str, ledger: IRefreshTokenLedger
    ) -> RefreshTokenRecord:
        """Return the live ledger record for token. Raises InvalidTokenException."""


# Email
class IEmailDispatcher(Protocol):
    """Protocol for transactional email (best-effort)."""

    async def send_password_reset_email(
        self, to: str, raw_token: str, expires_at: datetime
    ) -> None:
        """Send the reset link. May raise; callers run it fire-and-forget."""


# Security events
class ISecurityEventSink(Protocol):
    """Protocol for audit/security event recording. Must never raise."""

    def record(self, event: SecurityEvent) -> None:
        """Record the event (fire-and-forget)."""
