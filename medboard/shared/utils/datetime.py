"""UTC datetime helpers and the injectable clock.

Every datetime in the service is timezone-aware UTC. Token windows and expiry
checks read "now" from a Clock so tests can pin and advance time.
"""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default Clock: the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime read from storage to aware UTC.

    Naive values are taken to be UTC already; aware values are converted.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp_utc(timestamp: float) -> datetime:
    """Aware UTC datetime from a Unix timestamp (JWT exp/iat)."""
    return datetime.fromtimestamp(timestamp, tz=UTC)
