"""Application services: session lifecycle, password reset, account management."""

from medboard.application.services.password_change_service import PasswordChangeService
from medboard.application.services.password_reset_manager import PasswordResetManager
from medboard.application.services.registration_service import RegistrationService
from medboard.application.services.session_manager import SessionLifecycleManager
from medboard.application.services.token_cleanup_service import TokenCleanupService

__all__ = [
    "PasswordChangeService",
    "PasswordResetManager",
    "RegistrationService",
    "SessionLifecycleManager",
    "TokenCleanupService",
]
