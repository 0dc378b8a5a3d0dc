"""Delete expired refresh tokens and print ledger statistics.

Usage:
    python -m scripts.cleanup_expired_tokens [--stats-only]
Meant for cron / a scheduled job; never runs on the request path.
"""

import asyncio
import sys

from medboard.application.services import TokenCleanupService
from medboard.infrastructure.persistence.database import dispose_engine, get_session_factory
from medboard.infrastructure.persistence.repositories import RefreshTokenRepository
from medboard.shared.telemetry.logging import setup_logging


async def main() -> None:
    """Run one cleanup pass (unless --stats-only) and print counts."""
    setup_logging()
    stats_only = "--stats-only" in sys.argv[1:]
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            async with session.begin():
                service = TokenCleanupService(RefreshTokenRepository(session))
                before = await service.stats()
                deleted = 0 if stats_only else await service.cleanup_expired()
                after = await service.stats() if deleted else before
        print(f"Refresh tokens before: total={before.total} active={before.active} expired={before.expired}")
        if not stats_only:
            print(f"Deleted expired: {deleted}")
            print(f"Refresh tokens after:  total={after.total} active={after.active} expired={after.expired}")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
