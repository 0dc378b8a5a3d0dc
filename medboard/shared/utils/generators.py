"""ID and value generators (CUID primary keys, opaque one-time tokens)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# 40 random bytes, hex encoded (80 chars) for password reset links.
RESET_TOKEN_BYTES = 40


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_reset_token() -> str:
    """Return a new random password reset token (raw value; only its hash is stored)."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def generate_token_id() -> str:
    """Return a random JWT id (jti) so tokens minted in the same second differ."""
    return secrets.token_urlsafe(16)
