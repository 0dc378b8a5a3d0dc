"""Input normalization and log-safe redaction helpers."""

# Column limits for device metadata stored next to tokens.
MAX_IP_ADDRESS_LENGTH = 100
MAX_USER_AGENT_LENGTH = 500


def normalize_email(email: str | None) -> str:
    """Trim and lower-case an email address. None becomes the empty string.

    Every lookup and every write goes through this so email comparisons are
    case-insensitive regardless of how the address was typed.
    """
    if not email:
        return ""
    return email.strip().lower()


def redact_email(email: str | None) -> str:
    """Redact an email for log lines: keep the first two characters and the domain."""
    if not email or "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def truncate(value: str | None, max_length: int) -> str | None:
    """Return value cut to max_length, or None when value is empty."""
    if not value:
        return None
    return value[:max_length]
