"""Domain exceptions for the medboard auth service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers using status_code.

Credential and token errors use generic messages that never reveal whether an
account exists. Account-status errors (disabled, pending approval) state the
reason, since the caller already proved knowledge of valid credentials.
"""

from typing import Any


class MedboardException(Exception):
    """Base exception for all medboard application errors.

    Attributes:
        message: Human-readable, user-safe error description.
        error_code: Machine-readable error code.
        details: Additional error context (never secrets).
        status_code: HTTP status hint for the presentation layer.
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(MedboardException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(MedboardException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


# ---- Credentials and account status -------------------------------------------------


class InvalidCredentialsException(MedboardException):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS")


class AccountDisabledException(MedboardException):
    """Non-admin account has been deactivated by an administrator."""

    status_code = 403

    def __init__(self) -> None:
        super().__init__(
            "Your account has been deactivated by an administrator. "
            "Please contact the system administrator.",
            "ACCOUNT_DISABLED",
        )


class PendingApprovalException(MedboardException):
    """Non-admin account has not been approved by an administrator yet."""

    status_code = 403

    def __init__(self) -> None:
        super().__init__(
            "Your account is awaiting administrator approval. "
            "You can log in once it has been approved.",
            "PENDING_APPROVAL",
        )


class EmailAlreadyRegisteredException(MedboardException):
    """Registration with an email that already belongs to an account."""

    status_code = 409

    def __init__(self) -> None:
        super().__init__("This email address is already registered", "EMAIL_ALREADY_REGISTERED")


class IncorrectPasswordException(MedboardException):
    """Current password supplied to change-password does not match."""

    def __init__(self) -> None:
        super().__init__("Current password is incorrect", "INCORRECT_PASSWORD")


# ---- Sessions ---------------------------------------------------------------------


class InvalidTokenException(MedboardException):
    """Access or refresh token is malformed, forged, expired, revoked or unknown."""

    status_code = 401

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message, "INVALID_TOKEN")


class TokenNotFoundException(MedboardException):
    """Logout with a refresh token that matches no ledger record."""

    status_code = 404

    def __init__(self) -> None:
        super().__init__("Refresh token not found", "TOKEN_NOT_FOUND")


# ---- Password reset ---------------------------------------------------------------


class InvalidOrExpiredResetTokenException(MedboardException):
    """Reset token is unknown (or its owner no longer exists)."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid or expired password reset link",
            "INVALID_OR_EXPIRED_RESET_TOKEN",
        )


class ResetTokenAlreadyUsedException(MedboardException):
    """Reset token was already consumed; tokens are single-use regardless of expiry."""

    def __init__(self) -> None:
        super().__init__(
            "This password reset link has already been used",
            "RESET_TOKEN_ALREADY_USED",
        )


class ResetTokenExpiredException(MedboardException):
    """Reset token exists and is unused but its validity window has passed."""

    def __init__(self) -> None:
        super().__init__(
            "This password reset link has expired",
            "RESET_TOKEN_EXPIRED",
        )


# ---- Storage ----------------------------------------------------------------------


class InternalStorageException(MedboardException):
    """A multi-step write failed and was rolled back."""

    status_code = 500

    def __init__(self, operation: str, reason: str | None = None) -> None:
        details: dict[str, Any] = {"operation": operation}
        if reason:
            details["reason"] = reason
        super().__init__(
            "The operation could not be completed; please try again",
            "INTERNAL_STORAGE_ERROR",
            details,
        )
