"""Tests for auth endpoints against in-memory storage."""

from httpx import AsyncClient

from tests.conftest import TEST_PASSWORD

DOCTOR_BODY = {
    "email": "Doctor@Example.com",
    "password": TEST_PASSWORD,
    "first_name": "Ada",
    "last_name": "Lovelace",
}
HOSPITAL_BODY = {
    "email": "desk@hospital.org",
    "password": TEST_PASSWORD,
    "institution_name": "General Hospital",
    "phone": "+1 555 0100",
}


async def _login(client: AsyncClient, email: str = "doctor@example.com", password: str = TEST_PASSWORD):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


async def _approved_doctor(client: AsyncClient, credential_store) -> dict:
    """Register a doctor, approve it, log in and return the login JSON."""
    response = await client.post("/api/v1/auth/register/doctor", json=DOCTOR_BODY)
    assert response.status_code == 201
    credential_store.set_status(response.json()["user"]["id"], is_approved=True)
    response = await _login(client)
    assert response.status_code == 200
    return response.json()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---- registration ------------------------------------------------------------------


async def test_register_doctor_returns_201_pending(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/register/doctor", json=DOCTOR_BODY)
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "doctor@example.com"
    assert data["user"]["is_active"] is True
    assert data["user"]["is_approved"] is False
    assert data["profile"] == {"id": data["profile"]["id"], "kind": "doctor", "name": "Ada Lovelace"}
    assert "password" not in str(data).lower()


async def test_register_hospital_returns_201(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/register/hospital", json=HOSPITAL_BODY)
    assert response.status_code == 201
    data = response.json()
    assert data["profile"]["kind"] == "hospital"
    assert data["user"]["is_active"] is True
    assert data["user"]["is_approved"] is False


async def test_register_duplicate_email_returns_409(client: AsyncClient) -> None:
    await client.post("/api/v1/auth/register/doctor", json=DOCTOR_BODY)
    response = await client.post(
        "/api/v1/auth/register/hospital", json={**HOSPITAL_BODY, "email": "doctor@EXAMPLE.com"}
    )
    assert response.status_code == 409
    assert response.json()["error"] == "EMAIL_ALREADY_REGISTERED"


async def test_register_invalid_email_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register/doctor", json={**DOCTOR_BODY, "email": "not-an-email"}
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_register_short_password_returns_422(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/register/doctor", json={**DOCTOR_BODY, "password": "short"}
    )
    assert response.status_code == 422


# ---- login -------------------------------------------------------------------------


async def test_login_missing_body_returns_422(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/login", json={})
    assert response.status_code == 422


async def test_login_pending_account_returns_403(client: AsyncClient) -> None:
    await client.post("/api/v1/auth/register/doctor", json=DOCTOR_BODY)
    response = await _login(client)
    assert response.status_code == 403
    assert response.json()["error"] == "PENDING_APPROVAL"


async def test_login_disabled_account_returns_403(client: AsyncClient, credential_store) -> None:
    response = await client.post("/api/v1/auth/register/doctor", json=DOCTOR_BODY)
    credential_store.set_status(response.json()["user"]["id"], is_active=False)
    response = await _login(client)
    assert response.status_code == 403
    assert response.json()["error"] == "ACCOUNT_DISABLED"


async def test_login_unknown_and_wrong_password_look_the_same(
    client: AsyncClient, credential_store
) -> None:
    await _approved_doctor(client, credential_store)
    unknown = await _login(client, "ghost@example.com")
    wrong = await _login(client, password="WrongPassword1")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


async def test_login_success_returns_tokens_and_user(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    assert data["token_type"] == "bearer"
    assert data["access_token"] and data["refresh_token"]
    assert data["is_first_login"] is True
    assert data["user"]["last_login"] is not None
    assert data["profile"]["name"] == "Ada Lovelace"
    second = await _login(client, " DOCTOR@example.com ")
    assert second.json()["is_first_login"] is False


async def test_auth_responses_are_not_cached(client: AsyncClient, credential_store) -> None:
    await client.post("/api/v1/auth/register/doctor", json=DOCTOR_BODY)
    response = await _login(client)
    assert response.headers["cache-control"] == "no-store"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-request-id"]


# ---- authenticated endpoints -------------------------------------------------------


async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["error"] == "INVALID_TOKEN"


async def test_me_returns_user_and_profile(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    response = await client.get("/api/v1/auth/me", headers=_bearer(data["access_token"]))
    assert response.status_code == 200
    assert response.json()["user"]["id"] == data["user"]["id"]
    assert response.json()["profile"]["kind"] == "doctor"


async def test_verify_token(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    response = await client.post("/api/v1/auth/verify-token", headers=_bearer(data["access_token"]))
    assert response.status_code == 200
    assert response.json() == {"valid": True, "user_id": data["user"]["id"], "role": "doctor"}
    bad = await client.post("/api/v1/auth/verify-token", headers=_bearer("not.a.token"))
    assert bad.status_code == 401


async def test_refresh_token_is_not_an_access_token(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    response = await client.get("/api/v1/auth/me", headers=_bearer(data["refresh_token"]))
    assert response.status_code == 401


async def test_deactivation_applies_to_live_access_token(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    credential_store.set_status(data["user"]["id"], is_active=False)
    response = await client.get("/api/v1/auth/me", headers=_bearer(data["access_token"]))
    assert response.status_code == 403


# ---- refresh and logout ------------------------------------------------------------


async def test_refresh_without_rotation_then_with_rotation(
    client: AsyncClient, credential_store, clock
) -> None:
    data = await _approved_doctor(client, credential_store)
    refresh_token = data["refresh_token"]

    early = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert early.status_code == 200
    assert early.json()["rotated"] is False
    assert early.json()["refresh_token"] == refresh_token

    clock.advance(days=4)
    late = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert late.status_code == 200
    assert late.json()["rotated"] is True
    assert late.json()["refresh_token"] != refresh_token

    reused = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert reused.status_code == 401


async def test_refresh_for_deactivated_user_revokes_sessions(
    client: AsyncClient, credential_store, refresh_ledger
) -> None:
    data = await _approved_doctor(client, credential_store)
    credential_store.set_status(data["user"]["id"], is_active=False)
    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert response.status_code == 403
    assert refresh_ledger.for_user(data["user"]["id"]) == []


async def test_logout_then_logout_again(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    body = {"refresh_token": data["refresh_token"]}
    first = await client.post("/api/v1/auth/logout", json=body)
    assert first.status_code == 200
    assert first.json() == {"message": "Logged out successfully"}
    second = await client.post("/api/v1/auth/logout", json=body)
    assert second.status_code == 404
    assert second.json()["error"] == "TOKEN_NOT_FOUND"


async def test_logout_all(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    await _login(client)
    response = await client.post("/api/v1/auth/logout-all", headers=_bearer(data["access_token"]))
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out from all devices", "revoked": 2}
    refreshed = await client.post("/api/v1/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert refreshed.status_code == 401


# ---- passwords ---------------------------------------------------------------------


async def test_forgot_password_response_does_not_reveal_account(
    client: AsyncClient, credential_store, background, email_dispatcher
) -> None:
    await _approved_doctor(client, credential_store)
    known = await client.post("/api/v1/auth/forgot-password", json={"email": "doctor@example.com"})
    unknown = await client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    await background.wait_idle()
    assert [to for to, _, _ in email_dispatcher.sent] == ["doctor@example.com"]


async def test_reset_password_flow(
    client: AsyncClient, credential_store, background, email_dispatcher, refresh_ledger
) -> None:
    data = await _approved_doctor(client, credential_store)
    await client.post("/api/v1/auth/forgot-password", json={"email": "doctor@example.com"})
    await background.wait_idle()
    raw_token = email_dispatcher.sent[0][1]

    response = await client.post(
        "/api/v1/auth/reset-password", json={"token": raw_token, "password": "BrandNew123"}
    )
    assert response.status_code == 200
    assert refresh_ledger.for_user(data["user"]["id"]) == []
    assert (await _login(client, password="BrandNew123")).status_code == 200

    reused = await client.post(
        "/api/v1/auth/reset-password", json={"token": raw_token, "password": "Another123"}
    )
    assert reused.status_code == 400
    assert reused.json()["error"] == "RESET_TOKEN_ALREADY_USED"


async def test_reset_password_unknown_token(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/reset-password", json={"token": "abc", "password": "BrandNew123"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_OR_EXPIRED_RESET_TOKEN"


async def test_change_password(client: AsyncClient, credential_store) -> None:
    data = await _approved_doctor(client, credential_store)
    headers = _bearer(data["access_token"])
    wrong = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "nope-nope", "new_password": "BrandNew123"},
        headers=headers,
    )
    assert wrong.status_code == 400
    assert wrong.json()["error"] == "INCORRECT_PASSWORD"

    ok = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": TEST_PASSWORD, "new_password": "BrandNew123"},
        headers=headers,
    )
    assert ok.status_code == 200
    refreshed = await client.post("/api/v1/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert refreshed.status_code == 401
    assert (await _login(client, password="BrandNew123")).status_code == 200
