"""Repositories: Postgres implementations of the application storage ports."""

from medboard.infrastructure.persistence.repositories.password_reset_token_repo import (
    PasswordResetTokenRepository,
)
from medboard.infrastructure.persistence.repositories.refresh_token_repo import (
    RefreshTokenRepository,
)
from medboard.infrastructure.persistence.repositories.transaction import (
    SqlAlchemyTransactionManager,
)
from medboard.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "SqlAlchemyTransactionManager",
    "UserRepository",
]
