"""Storage dependencies: repositories and transactions on the request session."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medboard.application.interfaces.repositories import (
    ICredentialStore,
    IPasswordResetTokenStore,
    IRefreshTokenLedger,
    ITransactionManager,
)
from medboard.infrastructure.persistence.database import get_db_transactional
from medboard.infrastructure.persistence.repositories import (
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    SqlAlchemyTransactionManager,
    UserRepository,
)

DbSession = Annotated[AsyncSession, Depends(get_db_transactional)]


async def get_credential_store(db: DbSession) -> ICredentialStore:
    return UserRepository(db)


async def get_refresh_ledger(db: DbSession) -> IRefreshTokenLedger:
    return RefreshTokenRepository(db)


async def get_reset_token_store(db: DbSession) -> IPasswordResetTokenStore:
    return PasswordResetTokenRepository(db)


async def get_transaction_manager(db: DbSession) -> ITransactionManager:
    """Atomic blocks on the same session the repositories use (FastAPI caches it per request)."""
    return SqlAlchemyTransactionManager(db)
