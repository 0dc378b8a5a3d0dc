"""Refresh token ledger (Postgres). Rows hold the token hash only."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import case, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medboard.application.dtos.auth import RefreshTokenRecord, TokenStats
from medboard.infrastructure.persistence.models.refresh_token import RefreshToken
from medboard.infrastructure.persistence.repositories.base import BaseRepository
from medboard.shared.utils.datetime import ensure_utc


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        user_id=row.user_id,
        token_hash=row.token_hash,
        expires_at=ensure_utc(row.expires_at),
        created_at=ensure_utc(row.created_at),
        user_agent=row.user_agent,
        ip_address=row.ip_address,
    )


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """IRefreshTokenLedger backed by the refresh_token table."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RefreshToken)

    async def add(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
        created_at: datetime,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> RefreshTokenRecord:
        row = RefreshToken(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=created_at,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        self.db.add(row)
        await self.db.flush()
        return _to_record(row)

    async def find_by_hash(self, token_hash: str) -> RefreshTokenRecord | None:
        result = await self.db.execute(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        row = result.scalar_one_or_none()
        return _to_record(row) if row else None

    async def delete(self, record_id: str) -> bool:
        result = await self.db.execute(
            delete(RefreshToken).where(RefreshToken.id == record_id)
        )
        return bool(result.rowcount)

    async def delete_by_hash(self, token_hash: str) -> int:
        result = await self.db.execute(
            delete(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        return int(result.rowcount or 0)

    async def delete_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return int(result.rowcount or 0)

    async def delete_expired(self, now: datetime) -> int:
        result = await self.db.execute(
            delete(RefreshToken).where(RefreshToken.expires_at < now)
        )
        return int(result.rowcount or 0)

    async def stats(self, now: datetime) -> TokenStats:
        result = await self.db.execute(
            select(
                func.count(RefreshToken.id),
                func.coalesce(
                    func.sum(case((RefreshToken.expires_at < now, 1), else_=0)), 0
                ),
            )
        )
        total, expired = result.one()
        total = int(total or 0)
        expired = int(expired or 0)
        return TokenStats(total=total, active=total - expired, expired=expired)
