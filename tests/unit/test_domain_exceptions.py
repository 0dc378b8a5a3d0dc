"""Tests for domain exceptions (error_code, message, details, status_code)."""

import pytest

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


def test_base_exception_defaults() -> None:
    """MedboardException uses class name as error_code when none is provided."""
    exc = MedboardException("Something failed")
    assert exc.error_code == "MedboardException"
    assert exc.details == {}
    assert exc.status_code == 400
    assert exc.to_dict() == {
        "error": "MedboardException",
        "message": "Something failed",
        "details": {},
    }


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "email"}


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("user", "u1")
    assert exc.status_code == 404
    assert exc.details == {"resource_type": "user", "resource_id": "u1"}


@pytest.mark.parametrize(
    ("exc_type", "status_code", "error_code"),
    [
        (InvalidCredentialsException, 401, "INVALID_CREDENTIALS"),
        (AccountDisabledException, 403, "ACCOUNT_DISABLED"),
        (PendingApprovalException, 403, "PENDING_APPROVAL"),
        (EmailAlreadyRegisteredException, 409, "EMAIL_ALREADY_REGISTERED"),
        (IncorrectPasswordException, 400, "INCORRECT_PASSWORD"),
        (InvalidTokenException, 401, "INVALID_TOKEN"),
        (TokenNotFoundException, 404, "TOKEN_NOT_FOUND"),
        (InvalidOrExpiredResetTokenException, 400, "INVALID_OR_EXPIRED_RESET_TOKEN"),
        (ResetTokenAlreadyUsedException, 400, "RESET_TOKEN_ALREADY_USED"),
        (ResetTokenExpiredException, 400, "RESET_TOKEN_EXPIRED"),
    ],
)
def test_auth_exception_codes(exc_type, status_code: int, error_code: str) -> None:
    exc = exc_type()
    assert isinstance(exc, MedboardException)
    assert exc.status_code == status_code
    assert exc.error_code == error_code
    assert exc.message


def test_account_status_messages_are_distinct() -> None:
    """Gated users learn why they cannot log in."""
    assert "deactivated" in AccountDisabledException().message
    assert "approval" in PendingApprovalException().message


def test_internal_storage_exception_hides_reason_from_message() -> None:
    exc = InternalStorageException("login", reason="deadlock detected")
    assert exc.status_code == 500
    assert "deadlock" not in exc.message
    assert exc.details == {"operation": "login", "reason": "deadlock detected"}
