"""Security primitives: JWT codec and password hashing."""

from medboard.infrastructure.security.jwt import TokenCodec
from medboard.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    verify_password,
)

__all__ = ["BcryptPasswordHasher", "TokenCodec", "get_password_hash", "verify_password"]
