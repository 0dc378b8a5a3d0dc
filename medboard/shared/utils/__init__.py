"""Small cross-cutting helpers (UTC time, CUIDs, email normalization, background tasks)."""

from medboard.shared.utils.datetime import ensure_utc, utc_now
from medboard.shared.utils.generators import generate_cuid

__all__ = ["ensure_utc", "generate_cuid", "utc_now"]
