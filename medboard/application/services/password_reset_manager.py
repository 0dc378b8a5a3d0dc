"""Password reset: request a one-time emailed token, then redeem it for a new password."""

from __future__ import annotations

import asyncio
from datetime import timedelta

from medboard.application.dtos.auth import SecurityEvent
from medboard.application.interfaces.repositories import (
    ICredentialStore,
    IPasswordResetTokenStore,
    IRefreshTokenLedger,
    ITransactionManager,
)
from medboard.application.interfaces.services import (
    IEmailDispatcher,
    IPasswordHasher,
    ISecurityEventSink,
    ITokenCodec,
)
from medboard.application.services.security_events import emit_security_event
from medboard.core.config import AuthConfig
from medboard.domain.enums import SecurityEventType, Severity
from medboard.domain.exceptions import (
    InvalidOrExpiredResetTokenException,
    ResetTokenAlreadyUsedException,
    ResetTokenExpiredException,
)
from medboard.shared.utils.background import BackgroundTaskRunner
from medboard.shared.utils.datetime import Clock, ensure_utc, utc_now
from medboard.shared.utils.generators import generate_reset_token
from medboard.shared.utils.sanitization import (
    MAX_IP_ADDRESS_LENGTH,
    MAX_USER_AGENT_LENGTH,
    normalize_email,
    redact_email,
    truncate,
)


class PasswordResetManager:
    """Issues and redeems password reset tokens.

    request_reset never reveals whether an account exists. reset_password
    changes the password, consumes the token and revokes every refresh token
    of the user in one transaction.
    """

    def __init__(
        self,
        credential_store: ICredentialStore,
        reset_tokens: IPasswordResetTokenStore,
        refresh_ledger: IRefreshTokenLedger,
        token_codec: ITokenCodec,
        password_hasher: IPasswordHasher,
        transactions: ITransactionManager,
        email_dispatcher: IEmailDispatcher,
        background: BackgroundTaskRunner,
        config: AuthConfig,
        event_sink: ISecurityEventSink | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._credentials = credential_store
        self._reset_tokens = reset_tokens
        self._ledger = refresh_ledger
        self._codec = token_codec
        self._hasher = password_hasher
        self._transactions = transactions
        self._email = email_dispatcher
        self._background = background
        self._config = config
        self._event_sink = event_sink
        self._clock = clock

    async def request_reset(
        self,
        email: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Create a reset token for email and send it, if the account exists.

        Always returns normally for unknown or empty emails so callers cannot
        probe for accounts. Any earlier unused token of the user is replaced.
        The email is sent in the background; delivery failures are logged only.
        """
        normalized = normalize_email(email)
        ip = truncate(ip_address, MAX_IP_ADDRESS_LENGTH)
        agent = truncate(user_agent, MAX_USER_AGENT_LENGTH)

        user = await self._credentials.find_user_by_email(normalized) if normalized else None
        if user is None:
            self._emit(
                SecurityEvent(
                    event_type=SecurityEventType.PASSWORD_RESET_REQUESTED,
                    message="Password reset requested for unknown email",
                    severity=Severity.MEDIUM,
                    email=normalized or None,
                    ip_address=ip,
                    user_agent=agent,
                )
            )
            return

        raw_token = generate_reset_token()
        expires_at = self._clock() + timedelta(minutes=self._config.reset_token_ttl_minutes)
        async with self._transactions.atomic("password_reset_request"):
            await self._reset_tokens.delete_unused_for_user(user.id)
            await self._reset_tokens.add(
                user_id=user.id,
                token_hash=self._codec.hash_token(raw_token),
                expires_at=expires_at,
                ip_address=ip,
                user_agent=agent,
            )

        self._emit(
            SecurityEvent(
                event_type=SecurityEventType.PASSWORD_RESET_REQUESTED,
                message="Password reset token issued",
                user_id=user.id,
                email=user.email,
                ip_address=ip,
                user_agent=agent,
            )
        )
        recipient = user.email
        # The link is only valid once the token row is committed.
        self._transactions.after_commit(
            lambda: self._background.spawn(
                lambda: self._email.send_password_reset_email(recipient, raw_token, expires_at),
                f"password reset email to {redact_email(recipient)}",
            )
        )

    async def reset_password(
        self,
        token: str,
        new_password: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Redeem a reset token and set a new password.

        Raises:
            InvalidOrExpiredResetTokenException: Unknown token, or its user is gone.
            ResetTokenAlreadyUsedException: Token was redeemed before.
            ResetTokenExpiredException: Token is unused but past its expiry.
        """
        if not token:
            raise InvalidOrExpiredResetTokenException()
        record = await self._reset_tokens.find_by_hash(self._codec.hash_token(token))
        if record is None:
            raise InvalidOrExpiredResetTokenException()
        if record.used_at is not None:
            raise ResetTokenAlreadyUsedException()
        now = self._clock()
        expires_at = ensure_utc(record.expires_at)
        if expires_at is None or expires_at <= now:
            raise ResetTokenExpiredException()

        user = await self._credentials.get_user_by_id(record.user_id)
        if user is None:
            raise InvalidOrExpiredResetTokenException()

        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        async with self._transactions.atomic("password_reset"):
            await self._credentials.update_password_hash(user.id, password_hash)
            if not await self._reset_tokens.mark_used(record.id, now):
                raise ResetTokenAlreadyUsedException()
            revoked = await self._ledger.delete_for_user(user.id)

        self._emit(
            SecurityEvent(
                event_type=SecurityEventType.PASSWORD_RESET_COMPLETED,
                message="Password reset completed",
                severity=Severity.MEDIUM,
                user_id=user.id,
                email=user.email,
                ip_address=truncate(ip_address, MAX_IP_ADDRESS_LENGTH),
                user_agent=truncate(user_agent, MAX_USER_AGENT_LENGTH),
                metadata={"revoked_sessions": revoked},
            )
        )

    def _emit(self, event: SecurityEvent) -> None:
        emit_security_event(self._event_sink, event)
