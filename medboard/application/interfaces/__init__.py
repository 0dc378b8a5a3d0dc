"""Application ports: repository and service Protocols."""

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

__all__ = [
    "ICredentialStore",
    "IEmailDispatcher",
    "IPasswordHasher",
    "IPasswordResetTokenStore",
    "IRefreshTokenLedger",
    "ISecurityEventSink",
    "ITokenCodec",
    "ITransactionManager",
]
