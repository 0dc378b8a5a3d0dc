"""Set a user's password from the command line and end all their sessions.

Usage:
    python -m scripts.reset_password <email> <new_password>
"""

import asyncio
import sys

from medboard.core.config import get_settings
from medboard.infrastructure.persistence.database import dispose_engine, get_session_factory
from medboard.infrastructure.persistence.repositories import (
    RefreshTokenRepository,
    UserRepository,
)
from medboard.infrastructure.security import BcryptPasswordHasher


async def main() -> None:
    """Reset password for the user with this email."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.reset_password <email> <new_password>",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    new_password = sys.argv[2]

    hasher = BcryptPasswordHasher(get_settings().bcrypt_rounds)
    password_hash = await asyncio.to_thread(hasher.hash, new_password)
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            async with session.begin():
                users = UserRepository(session)
                user = await users.find_user_by_email(email)
                if user is None:
                    print(f"User not found: {email}", file=sys.stderr)
                    sys.exit(1)
                await users.update_password_hash(user.id, password_hash)
                revoked = await RefreshTokenRepository(session).delete_for_user(user.id)
        print(f"Password reset for user {user.id} ({user.email}); {revoked} session(s) ended")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
