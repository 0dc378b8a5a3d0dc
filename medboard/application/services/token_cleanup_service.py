"""Expired refresh-token cleanup and ledger statistics (maintenance job, never on the request path)."""

from __future__ import annotations

from medboard.application.dtos.auth import TokenStats
from medboard.application.interfaces.repositories import IRefreshTokenLedger
from medboard.shared.telemetry.logging import get_logger
from medboard.shared.utils.datetime import Clock, utc_now

logger = get_logger(__name__)


class TokenCleanupService:
    """Deletes expired refresh-token records. Best-effort: failures are logged and report zero."""

    def __init__(self, refresh_ledger: IRefreshTokenLedger, clock: Clock = utc_now) -> None:
        self._ledger = refresh_ledger
        self._clock = clock

    async def cleanup_expired(self) -> int:
        try:
            deleted = await self._ledger.delete_expired(self._clock())
        except Exception:  # noqa: BLE001
            logger.exception("Expired refresh token cleanup failed")
            return 0
        if deleted:
            logger.info("Cleaned up %d expired refresh tokens", deleted)
        else:
            logger.debug("No expired refresh tokens to clean up")
        return deleted

    async def stats(self) -> TokenStats:
        stats = await self._ledger.stats(self._clock())
        logger.info(
            "Refresh tokens: total=%d active=%d expired=%d",
            stats.total,
            stats.active,
            stats.expired,
        )
        return stats
