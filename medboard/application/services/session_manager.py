"""Session lifecycle: login, refresh (with rotation), logout, logout-all.

A refresh token moves through Issued -> Active -> (Rotated | Revoked | Expired).
Account status is re-read from the credential store on every refresh and every
authenticated request; the access token's embedded flags are never trusted for
gating.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime

from medboard.application.dtos.auth import (
    AccessTokenClaims,
    LoginResult,
    RefreshResult,
    RefreshTokenRecord,
    SecurityEvent,
    TokenPair,
)
from medboard.application.dtos.user import AccountResult, UserRecord
from medboard.application.interfaces.repositories import (
    ICredentialStore,
    IRefreshTokenLedger,
    ITransactionManager,
)
from medboard.application.interfaces.services import (
    IPasswordHasher,
    ISecurityEventSink,
    ITokenCodec,
)
from medboard.application.services.security_events import emit_security_event
from medboard.core.config import AuthConfig
from medboard.domain.account_status import ensure_account_allowed
from medboard.domain.enums import SecurityEventType, Severity
from medboard.domain.exceptions import (
    AccountDisabledException,
    InvalidCredentialsException,
    InvalidTokenException,
    PendingApprovalException,
    ResourceNotFoundException,
    TokenNotFoundException,
)
from medboard.shared.utils.datetime import Clock, ensure_utc, utc_now
from medboard.shared.utils.sanitization import (
    MAX_IP_ADDRESS_LENGTH,
    MAX_USER_AGENT_LENGTH,
    normalize_email,
    truncate,
)

_DUMMY_PASSWORD = "not-a-real-password"


class SessionLifecycleManager:
    """Issues, rotates and revokes sessions (access + refresh token pairs)."""

    def __init__(
        self,
        credential_store: ICredentialStore,
        refresh_ledger: IRefreshTokenLedger,
        token_codec: ITokenCodec,
        password_hasher: IPasswordHasher,
        transactions: ITransactionManager,
        config: AuthConfig,
        event_sink: ISecurityEventSink | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._credentials = credential_store
        self._ledger = refresh_ledger
        self._codec = token_codec
        self._hasher = password_hasher
        self._transactions = transactions
        self._config = config
        self._event_sink = event_sink
        self._clock = clock
        self._dummy_hash: str | None = None

    # ---- login ------------------------------------------------------------------

    async def login(
        self,
        email: str,
        password: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> LoginResult:
        """Authenticate by email and password and open a new session.

        Unknown email and wrong password are indistinguishable to the caller
        (same exception, and a dummy bcrypt comparison keeps timing similar).
        Non-admin accounts that are deactivated or unapproved are rejected
        after the password check and receive no tokens.

        Raises:
            InvalidCredentialsException: Unknown email or wrong password.
            AccountDisabledException: Non-admin account deactivated.
            PendingApprovalException: Non-admin account not yet approved.
        """
        normalized = normalize_email(email)
        ip = truncate(ip_address, MAX_IP_ADDRESS_LENGTH)
        agent = truncate(user_agent, MAX_USER_AGENT_LENGTH)

        user = await self._credentials.find_user_by_email(normalized) if normalized else None
        if user is None:
            await self._verify_against_dummy(password)
            self._emit(
                SecurityEventType.LOGIN_FAILED,
                "Login attempt for unknown email",
                severity=Severity.MEDIUM,
                email=normalized or None,
                ip_address=ip,
                user_agent=agent,
            )
            raise InvalidCredentialsException()

        if not await asyncio.to_thread(self._hasher.verify, password, user.password_hash):
            self._emit(
                SecurityEventType.LOGIN_FAILED,
                "Login attempt with wrong password",
                severity=Severity.MEDIUM,
                user_id=user.id,
                email=user.email,
                ip_address=ip,
                user_agent=agent,
            )
            raise InvalidCredentialsException()

        try:
            ensure_account_allowed(user.role, user.is_active, user.is_approved)
        except (AccountDisabledException, PendingApprovalException) as exc:
            self._emit(
                SecurityEventType.LOGIN_FAILED,
                f"Login blocked: {exc.error_code}",
                user_id=user.id,
                email=user.email,
                ip_address=ip,
                user_agent=agent,
            )
            raise

        now = self._clock()
        access_token = self._codec.mint_access_token(self._claims_for(user))
        refresh_token = self._codec.mint_refresh_token(user.id)
        async with self._transactions.atomic("login"):
            previous_login = await self._credentials.touch_last_login(user.id, now)
            await self._ledger.add(
                user_id=user.id,
                token_hash=self._codec.hash_token(refresh_token),
                expires_at=now + self._config.refresh_token_ttl,
                created_at=now,
                user_agent=agent,
                ip_address=ip,
            )

        profile = await self._credentials.get_profile_by_user_id(user.id, user.role)
        self._emit(
            SecurityEventType.LOGIN_SUCCESS,
            "User logged in",
            user_id=user.id,
            email=user.email,
            ip_address=ip,
            user_agent=agent,
        )
        return LoginResult(
            user=replace(user, last_login=now),
            profile=profile,
            tokens=TokenPair(access_token=access_token, refresh_token=refresh_token),
            is_first_login=previous_login is None,
        )

    # ---- refresh ----------------------------------------------------------------

    async def refresh(
        self,
        refresh_token: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> RefreshResult:
        """Exchange a live refresh token for a new access token.

        Once more than rotation_threshold_fraction of the token's validity window
        has elapsed, the refresh token is rotated: a new one is issued and the
        old record is deleted in the same transaction, so the old raw token can
        never be used again. Otherwise the same refresh token is returned.

        Raises:
            InvalidTokenException: Token fails verification, is not in the ledger,
                is expired, or its owner no longer exists.
            AccountDisabledException / PendingApprovalException: Owner is gated;
                all of the owner's refresh tokens are revoked first.
        """
        record = await self._codec.verify_refresh_token_record(refresh_token, self._ledger)

        user = await self._credentials.get_user_by_id(record.user_id)
        if user is None:
            await self._ledger.delete(record.id)
            raise InvalidTokenException()

        try:
            ensure_account_allowed(user.role, user.is_active, user.is_approved)
        except (AccountDisabledException, PendingApprovalException) as exc:
            revoked = await self._ledger.delete_for_user(user.id)
            self._emit(
                SecurityEventType.SESSION_REVOKED,
                f"Sessions revoked on refresh: {exc.error_code}",
                severity=Severity.MEDIUM,
                user_id=user.id,
                metadata={"revoked": revoked},
            )
            raise

        access_token = self._codec.mint_access_token(self._claims_for(user))
        now = self._clock()
        if not self._should_rotate(record, now):
            return RefreshResult(
                user=user,
                access_token=access_token,
                refresh_token=refresh_token,
                rotated=False,
            )

        new_refresh_token = self._codec.mint_refresh_token(user.id)
        async with self._transactions.atomic("refresh_rotation"):
            await self._ledger.add(
                user_id=user.id,
                token_hash=self._codec.hash_token(new_refresh_token),
                expires_at=now + self._config.refresh_token_ttl,
                created_at=now,
                user_agent=truncate(user_agent, MAX_USER_AGENT_LENGTH) or record.user_agent,
                ip_address=truncate(ip_address, MAX_IP_ADDRESS_LENGTH) or record.ip_address,
            )
            # A concurrent refresh already rotated this token.
            if not await self._ledger.delete(record.id):
                raise InvalidTokenException()
        return RefreshResult(
            user=user,
            access_token=access_token,
            refresh_token=new_refresh_token,
            rotated=True,
        )

    def _should_rotate(self, record: RefreshTokenRecord, now: datetime) -> bool:
        created_at = ensure_utc(record.created_at)
        if created_at is None:
            return True
        elapsed = now - created_at
        return elapsed > record.validity_window * self._config.rotation_threshold_fraction

    # ---- logout -----------------------------------------------------------------

    async def logout(self, refresh_token: str) -> None:
        """Revoke exactly the session identified by refresh_token.

        Raises:
            TokenNotFoundException: No ledger record matches the token.
        """
        deleted = await self._ledger.delete_by_hash(self._codec.hash_token(refresh_token))
        if deleted == 0:
            raise TokenNotFoundException()
        self._emit(SecurityEventType.LOGOUT, "Session ended")

    async def logout_all(self, user_id: str) -> int:
        """Revoke every session of user_id; return how many were deleted (0 is fine)."""
        deleted = await self._ledger.delete_for_user(user_id)
        self._emit(
            SecurityEventType.LOGOUT_ALL,
            "All sessions ended",
            user_id=user_id,
            metadata={"revoked": deleted},
        )
        return deleted

    # ---- authenticated requests -------------------------------------------------

    async def authenticate_access_token(self, access_token: str) -> UserRecord:
        """Verify an access token and return its owner after re-applying gating.

        Raises:
            InvalidTokenException: Token invalid or owner missing.
            AccountDisabledException / PendingApprovalException: Owner is gated.
        """
        claims = self._codec.decode_access_token(access_token)
        user = await self._credentials.get_user_by_id(claims.user_id)
        if user is None:
            raise InvalidTokenException()
        ensure_account_allowed(user.role, user.is_active, user.is_approved)
        return user

    async def get_current_account(self, user_id: str) -> AccountResult:
        """Return user plus role profile. Raises ResourceNotFoundException."""
        user = await self._credentials.get_user_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        profile = await self._credentials.get_profile_by_user_id(user.id, user.role)
        return AccountResult(user=user, profile=profile)

    # ---- helpers ----------------------------------------------------------------

    @staticmethod
    def _claims_for(user: UserRecord) -> AccessTokenClaims:
        return AccessTokenClaims(
            user_id=user.id,
            role=user.role,
            is_approved=user.is_approved,
            is_active=user.is_active,
        )

    async def _verify_against_dummy(self, password: str) -> None:
        """Spend one bcrypt comparison so unknown emails take as long as wrong passwords."""
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(self._hasher.hash, _DUMMY_PASSWORD)
        await asyncio.to_thread(self._hasher.verify, password, self._dummy_hash)

    def _emit(
        self,
        event_type: SecurityEventType,
        message: str,
        *,
        severity: Severity = Severity.LOW,
        **fields,
    ) -> None:
        emit_security_event(
            self._event_sink,
            SecurityEvent(event_type=event_type, message=message, severity=severity, **fields),
        )
