"""Domain enumerations."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    """Account role. Admins bypass active/approved gating."""

    DOCTOR = "doctor"
    HOSPITAL = "hospital"
    ADMIN = "admin"


class SecurityEventType(_ValuesMixin, str, Enum):
    """Security events recorded by the auth managers (fire-and-forget)."""

    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    LOGOUT_ALL = "logout_all"
    SESSION_REVOKED = "session_revoked"
    USER_REGISTERED = "user_registered"
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"


class Severity(_ValuesMixin, str, Enum):
    """Severity attached to security events."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
