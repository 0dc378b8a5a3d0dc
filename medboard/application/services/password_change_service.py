"""Change password for an authenticated user."""

from __future__ import annotations

import asyncio

from medboard.application.dtos.auth import SecurityEvent
from medboard.application.interfaces.repositories import (
    ICredentialStore,
    IRefreshTokenLedger,
    ITransactionManager,
)
from medboard.application.interfaces.services import IPasswordHasher, ISecurityEventSink
from medboard.application.services.security_events import emit_security_event
from medboard.domain.enums import SecurityEventType, Severity
from medboard.domain.exceptions import IncorrectPasswordException, ResourceNotFoundException


class PasswordChangeService:
    """Verifies the current password, stores the new one and revokes all sessions."""

    def __init__(
        self,
        credential_store: ICredentialStore,
        refresh_ledger: IRefreshTokenLedger,
        password_hasher: IPasswordHasher,
        transactions: ITransactionManager,
        event_sink: ISecurityEventSink | None = None,
    ) -> None:
        self._credentials = credential_store
        self._ledger = refresh_ledger
        self._hasher = password_hasher
        self._transactions = transactions
        self._event_sink = event_sink

    async def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> int:
        """Change the password; return the number of refresh tokens revoked.

        Raises:
            ResourceNotFoundException: User does not exist.
            IncorrectPasswordException: current_password does not match.
        """
        user = await self._credentials.get_user_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        if not await asyncio.to_thread(
            self._hasher.verify, current_password, user.password_hash
        ):
            raise IncorrectPasswordException()

        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        async with self._transactions.atomic("change_password"):
            await self._credentials.update_password_hash(user.id, password_hash)
            revoked = await self._ledger.delete_for_user(user.id)

        emit_security_event(
            self._event_sink,
            SecurityEvent(
                event_type=SecurityEventType.PASSWORD_CHANGED,
                message="Password changed",
                severity=Severity.MEDIUM,
                user_id=user.id,
                email=user.email,
                metadata={"revoked_sessions": revoked},
            ),
        )
        return revoked
