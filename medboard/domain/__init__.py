"""Domain layer: enums, account-status policy, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from medboard.domain.account_status import ensure_account_allowed, is_gated
from medboard.domain.enums import SecurityEventType, Severity, UserRole
from medboard.domain.exceptions import (
    AccountDisabledException,
    EmailAlreadyRegisteredException,
    IncorrectPasswordException,
    InternalStorageException,
    InvalidCredentialsException,
    InvalidOrExpiredResetTokenException,
    InvalidTokenException,
    MedboardException,
    PendingApprovalException,
    ResetTokenAlreadyUsedException,
    ResetTokenExpiredException,
    ResourceNotFoundException,
    TokenNotFoundException,
    ValidationException,
)

__all__ = [
    # Policy
    "ensure_account_allowed",
    "is_gated",
    # Enums
    "SecurityEventType",
    "Severity",
    "UserRole",
    # Exceptions
    "AccountDisabledException",
    "EmailAlreadyRegisteredException",
    "IncorrectPasswordException",
    "InternalStorageException",
    "InvalidCredentialsException",
    "InvalidOrExpiredResetTokenException",
    "InvalidTokenException",
    "MedboardException",
    "PendingApprovalException",
    "ResetTokenAlreadyUsedException",
    "ResetTokenExpiredException",
    "ResourceNotFoundException",
    "TokenNotFoundException",
    "ValidationException",
]
