"""Tests for bcrypt password hashing with SHA-256 pre-hash."""

from medboard.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    verify_password,
)


def test_hash_verifies_and_is_salted() -> None:
    first = get_password_hash("s3cret-pass", rounds=4)
    second = get_password_hash("s3cret-pass", rounds=4)
    assert first != second
    assert verify_password("s3cret-pass", first)
    assert not verify_password("wrong-pass", first)


def test_rounds_are_encoded_in_hash() -> None:
    assert get_password_hash("pw", rounds=5).startswith("$2b$05$")


def test_passwords_longer_than_72_bytes_are_not_truncated() -> None:
    base = "x" * 80
    hashed = get_password_hash(base + "A", rounds=4)
    assert not verify_password(base + "B", hashed)


def test_malformed_hash_does_not_raise() -> None:
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_hasher_port() -> None:
    hasher = BcryptPasswordHasher(rounds=4)
    hashed = hasher.hash("pw-123456")
    assert hasher.verify("pw-123456", hashed)
    assert not hasher.verify("pw-654321", hashed)
