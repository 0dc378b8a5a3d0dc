"""One-time password reset token store (Postgres). Raw tokens are never persisted."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from medboard.application.dtos.auth import PasswordResetTokenRecord
from medboard.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from medboard.infrastructure.persistence.repositories.base import BaseRepository
from medboard.shared.utils.datetime import ensure_utc


def _to_record(row: PasswordResetToken) -> PasswordResetTokenRecord:
    return PasswordResetTokenRecord(
        id=row.id,
        user_id=row.user_id,
        token_hash=row.token_hash,
        expires_at=ensure_utc(row.expires_at),
        used_at=ensure_utc(row.used_at),
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        created_at=ensure_utc(row.created_at),
    )


class PasswordResetTokenRepository(BaseRepository[PasswordResetToken]):
    """IPasswordResetTokenStore backed by the password_reset_token table."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PasswordResetToken)

    async def delete_unused_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            delete(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id)
            .where(PasswordResetToken.used_at.is_(None))
        )
        return int(result.rowcount or 0)

    async def add(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> PasswordResetTokenRecord:
        row = PasswordResetToken(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            used_at=None,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        created = await self._create(row)
        return _to_record(created)

    async def find_by_hash(self, token_hash: str) -> PasswordResetTokenRecord | None:
        result = await self.db.execute(
            select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        )
        row = result.scalar_one_or_none()
        return _to_record(row) if row else None

    async def mark_used(self, token_id: str, at: datetime) -> bool:
        result = await self.db.execute(
            update(PasswordResetToken)
            .where(PasswordResetToken.id == token_id)
            .where(PasswordResetToken.used_at.is_(None))
            .values(used_at=at)
        )
        return bool(result.rowcount)
