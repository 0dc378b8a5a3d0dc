"""Create an admin user (active and approved; admins bypass approval gating).

Usage:
    python -m scripts.create_admin <email> [password]
If password is omitted, a random one is printed.
"""

import asyncio
import secrets
import sys

from medboard.application.dtos.user import NewUser
from medboard.core.config import get_settings
from medboard.domain.enums import UserRole
from medboard.domain.exceptions import EmailAlreadyRegisteredException
from medboard.infrastructure.persistence.database import dispose_engine, get_session_factory
from medboard.infrastructure.persistence.repositories import UserRepository
from medboard.infrastructure.security import BcryptPasswordHasher
from medboard.shared.utils.sanitization import normalize_email


async def main() -> None:
    """Create the admin user."""
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.create_admin <email> [password]", file=sys.stderr)
        sys.exit(1)
    email = normalize_email(sys.argv[1])
    password = sys.argv[2] if len(sys.argv) > 2 else secrets.token_urlsafe(12)

    hasher = BcryptPasswordHasher(get_settings().bcrypt_rounds)
    password_hash = await asyncio.to_thread(hasher.hash, password)
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            async with session.begin():
                try:
                    user = await UserRepository(session).create_user(
                        NewUser(
                            email=email,
                            password_hash=password_hash,
                            role=UserRole.ADMIN.value,
                            is_active=True,
                            is_approved=True,
                        )
                    )
                except EmailAlreadyRegisteredException:
                    print(f"Email already registered: {email}", file=sys.stderr)
                    sys.exit(1)
        print(f"Created admin: {user.id} ({user.email})")
        if len(sys.argv) <= 2:
            print(f"Password: {password}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
