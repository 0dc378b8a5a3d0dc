"""DTOs for tokens, sessions, password reset records, and security events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from medboard.application.dtos.user import ProfileResult, UserRecord
from medboard.domain.enums import SecurityEventType, Severity


@dataclass(frozen=True)
class AccessTokenClaims:
    """Claims embedded in an access token: enough for routine authorization without a DB read."""

    user_id: str
    role: str
    is_approved: bool
    is_active: bool


@dataclass(frozen=True)
class RefreshTokenClaims:
    """Claims of a refresh token. Only the owner id; status is re-read on every refresh."""

    user_id: str
    token_id: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    token_type: str = "bearer"


@dataclass(frozen=True)
class RefreshTokenRecord:
    """One issued refresh token as stored in the ledger (hash only, never the raw value)."""

    id: str
    user_id: str
    token_hash: str
    expires_at: datetime
    created_at: datetime
    user_agent: str | None = None
    ip_address: str | None = None

    @property
    def validity_window(self) -> timedelta:
        """Total lifetime of the token (expires_at - created_at)."""
        return self.expires_at - self.created_at


@dataclass(frozen=True)
class PasswordResetTokenRecord:
    id: str
    user_id: str
    token_hash: str
    expires_at: datetime
    used_at: datetime | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class TokenStats:
    total: int
    active: int
    expired: int


@dataclass(frozen=True)
class LoginResult:
    user: UserRecord
    profile: ProfileResult | None
    tokens: TokenPair
    is_first_login: bool


@dataclass(frozen=True)
class RefreshResult:
    user: UserRecord
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    rotated: bool = False


@dataclass(frozen=True)
class SecurityEvent:
    """A security-relevant occurrence handed to the event sink."""

    event_type: SecurityEventType
    message: str
    severity: Severity = Severity.LOW
    user_id: str | None = None
    email: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
