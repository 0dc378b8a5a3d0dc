"""Tests for TokenCodec (minting, verification, hashing, ledger lookup)."""

from datetime import UTC, datetime

import pytest
from jose import jwt

from medboard.application.dtos.auth import AccessTokenClaims
from medboard.core.config import AuthConfig
from medboard.domain.exceptions import InvalidTokenException
from medboard.infrastructure.security.jwt import TokenCodec
from tests.fakes import FakeClock, InMemoryDatabase, InMemoryRefreshTokenLedger


def _claims(**overrides) -> AccessTokenClaims:
    values = {"user_id": "u1", "role": "doctor", "is_approved": True, "is_active": True}
    values.update(overrides)
    return AccessTokenClaims(**values)


def test_access_token_round_trip_carries_status_flags(codec: TokenCodec) -> None:
    token = codec.mint_access_token(_claims(is_approved=False))
    claims = codec.decode_access_token(token)
    assert claims == _claims(is_approved=False)


def test_refresh_token_carries_only_user_id(codec: TokenCodec) -> None:
    token = codec.mint_refresh_token("u1")
    payload = jwt.get_unverified_claims(token)
    assert payload["sub"] == "u1"
    assert payload["type"] == "refresh"
    assert "role" not in payload
    assert "is_approved" not in payload


def test_refresh_tokens_minted_in_same_instant_differ(codec: TokenCodec) -> None:
    first = codec.mint_refresh_token("u1")
    second = codec.mint_refresh_token("u1")
    assert first != second
    assert codec.hash_token(first) != codec.hash_token(second)


def test_refresh_expiry_matches_configured_ttl(codec: TokenCodec, clock: FakeClock) -> None:
    claims = codec.decode_refresh_token(codec.mint_refresh_token("u1"))
    assert claims.user_id == "u1"
    assert claims.expires_at == clock() + AuthConfig().refresh_token_ttl


def test_access_token_is_not_accepted_as_refresh_token(codec: TokenCodec) -> None:
    access = codec.mint_access_token(_claims())
    with pytest.raises(InvalidTokenException):
        codec.decode_refresh_token(access)


def test_refresh_token_is_not_accepted_as_access_token(codec: TokenCodec) -> None:
    refresh = codec.mint_refresh_token("u1")
    with pytest.raises(InvalidTokenException):
        codec.decode_access_token(refresh)


def test_token_signed_with_other_secret_is_rejected(codec: TokenCodec, clock: FakeClock) -> None:
    other = TokenCodec("other-access", "other-refresh", "k", AuthConfig(), clock=clock)
    with pytest.raises(InvalidTokenException):
        codec.decode_access_token(other.mint_access_token(_claims()))


@pytest.mark.parametrize("raw", ["", "not-a-jwt", "a.b.c"])
def test_malformed_tokens_are_rejected(codec: TokenCodec, raw: str) -> None:
    with pytest.raises(InvalidTokenException):
        codec.decode_access_token(raw)
    with pytest.raises(InvalidTokenException):
        codec.decode_refresh_token(raw)


def test_access_token_expires_on_the_injected_clock(codec: TokenCodec, clock: FakeClock) -> None:
    token = codec.mint_access_token(_claims())
    clock.advance(hours=23, minutes=59)
    codec.decode_access_token(token)
    clock.advance(minutes=2)
    with pytest.raises(InvalidTokenException):
        codec.decode_access_token(token)


@pytest.mark.parametrize(
    "pinned",
    [datetime(2001, 1, 1, tzinfo=UTC), datetime(2099, 6, 1, tzinfo=UTC)],
)
def test_expiry_ignores_the_wall_clock(pinned: datetime) -> None:
    clock = FakeClock(pinned)
    codec = TokenCodec("access", "refresh", "k", AuthConfig(), clock=clock)
    access = codec.mint_access_token(_claims())
    refresh = codec.mint_refresh_token("u1")
    assert codec.decode_access_token(access).user_id == "u1"
    assert codec.decode_refresh_token(refresh).expires_at == pinned + AuthConfig().refresh_token_ttl
    clock.advance(days=8)
    with pytest.raises(InvalidTokenException):
        codec.decode_refresh_token(refresh)


def test_token_without_exp_is_rejected(codec: TokenCodec) -> None:
    token = jwt.encode({"sub": "u1", "type": "access"}, "unit-access-secret", algorithm="HS256")
    with pytest.raises(InvalidTokenException):
        codec.decode_access_token(token)


def test_hash_token_is_deterministic_and_keyed(codec: TokenCodec, clock: FakeClock) -> None:
    assert codec.hash_token("abc") == codec.hash_token("abc")
    assert len(codec.hash_token("abc")) == 64
    other = TokenCodec("a", "b", "different-key", AuthConfig(), clock=clock)
    assert other.hash_token("abc") != codec.hash_token("abc")


def test_codec_requires_both_secrets(clock: FakeClock) -> None:
    with pytest.raises(ValueError):
        TokenCodec("", "refresh", "k", AuthConfig(), clock=clock)


async def test_verify_refresh_token_record_returns_live_record(
    codec: TokenCodec, clock: FakeClock
) -> None:
    ledger = InMemoryRefreshTokenLedger(InMemoryDatabase())
    token = codec.mint_refresh_token("u1")
    stored = await ledger.add(
        "u1", codec.hash_token(token), clock() + AuthConfig().refresh_token_ttl, clock()
    )
    assert await codec.verify_refresh_token_record(token, ledger) == stored


async def test_verify_refresh_token_record_rejects_unknown_token(codec: TokenCodec) -> None:
    ledger = InMemoryRefreshTokenLedger(InMemoryDatabase())
    with pytest.raises(InvalidTokenException):
        await codec.verify_refresh_token_record(codec.mint_refresh_token("u1"), ledger)


async def test_verify_refresh_token_record_rejects_expired_record(
    codec: TokenCodec, clock: FakeClock
) -> None:
    ledger = InMemoryRefreshTokenLedger(InMemoryDatabase())
    token = codec.mint_refresh_token("u1")
    await ledger.add("u1", codec.hash_token(token), clock(), clock())
    with pytest.raises(InvalidTokenException):
        await codec.verify_refresh_token_record(token, ledger)


async def test_verify_refresh_token_record_rejects_record_of_other_user(
    codec: TokenCodec, clock: FakeClock
) -> None:
    ledger = InMemoryRefreshTokenLedger(InMemoryDatabase())
    token = codec.mint_refresh_token("u1")
    await ledger.add("u2", codec.hash_token(token), clock() + AuthConfig().refresh_token_ttl, clock())
    with pytest.raises(InvalidTokenException):
        await codec.verify_refresh_token_record(token, ledger)
