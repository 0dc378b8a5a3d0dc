"""Tests for RegistrationService."""

import pytest

from medboard.application.dtos.user import NewDoctorProfile, NewHospitalProfile
from medboard.domain.exceptions import (
    EmailAlreadyRegisteredException,
    PendingApprovalException,
    ValidationException,
)
from tests.conftest import TEST_PASSWORD

DOCTOR = NewDoctorProfile(first_name="Grace", last_name="Hopper", title="Dr.")
HOSPITAL = NewHospitalProfile(institution_name="St. Elsewhere", phone="+1 555 0100")


async def test_registered_doctor_is_active_but_pending(registration, session_manager) -> None:
    result = await registration.register_doctor("Doctor@Example.com", TEST_PASSWORD, DOCTOR)
    assert result.user.email == "doctor@example.com"
    assert result.user.role == "doctor"
    assert (result.user.is_active, result.user.is_approved) == (True, False)
    assert result.profile.user_id == result.user.id
    with pytest.raises(PendingApprovalException):
        await session_manager.login("doctor@example.com", TEST_PASSWORD)


async def test_password_is_stored_hashed(registration, hasher) -> None:
    result = await registration.register_doctor("doc@example.com", TEST_PASSWORD, DOCTOR)
    assert result.user.password_hash != TEST_PASSWORD
    assert hasher.verify(TEST_PASSWORD, result.user.password_hash)


async def test_duplicate_email_is_rejected_case_insensitively(registration) -> None:
    await registration.register_doctor("doc@example.com", TEST_PASSWORD, DOCTOR)
    with pytest.raises(EmailAlreadyRegisteredException) as exc:
        await registration.register_hospital(" DOC@example.com", TEST_PASSWORD, HOSPITAL)
    assert exc.value.status_code == 409


async def test_hospital_profile_gets_normalized_email(registration, event_sink) -> None:
    result = await registration.register_hospital("Admin@StElsewhere.org ", TEST_PASSWORD, HOSPITAL)
    assert result.user.role == "hospital"
    assert result.profile.email == "admin@stelsewhere.org"
    assert result.profile.display_name == "St. Elsewhere"
    assert event_sink.types() == ["user_registered"]


async def test_empty_email_is_a_validation_error(registration) -> None:
    with pytest.raises(ValidationException):
        await registration.register_doctor("  ", TEST_PASSWORD, DOCTOR)


async def test_profile_failure_rolls_back_user(registration, credential_store, memory_db) -> None:
    async def broken_profile(user_id, data):
        raise RuntimeError("profile insert failed")

    credential_store.create_doctor_profile = broken_profile
    with pytest.raises(RuntimeError):
        await registration.register_doctor("doc@example.com", TEST_PASSWORD, DOCTOR)
    assert memory_db.users == {}
    assert memory_db.profiles == {}
