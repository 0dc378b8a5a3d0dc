"""Presentation-layer dependency injection (composition root).

Routes depend only on these providers. Tests override the storage providers
(get_credential_store, get_refresh_ledger, get_reset_token_store,
get_transaction_manager) and get_clock with in-memory fakes.
"""

from medboard.api.v1.dependencies.auth import CurrentUser, get_current_user
from medboard.api.v1.dependencies.db import (
    get_credential_store,
    get_refresh_ledger,
    get_reset_token_store,
    get_transaction_manager,
)
from medboard.api.v1.dependencies.services import (
    get_auth_config,
    get_background_runner,
    get_clock,
    get_email_dispatcher,
    get_password_change_service,
    get_password_hasher,
    get_password_reset_manager,
    get_registration_service,
    get_security_event_sink,
    get_session_manager,
    get_token_codec,
)

__all__ = [
    "CurrentUser",
    "get_auth_config",
    "get_background_runner",
    "get_clock",
    "get_credential_store",
    "get_current_user",
    "get_email_dispatcher",
    "get_password_change_service",
    "get_password_hasher",
    "get_password_reset_manager",
    "get_refresh_ledger",
    "get_registration_service",
    "get_reset_token_store",
    "get_security_event_sink",
    "get_session_manager",
    "get_token_codec",
    "get_transaction_manager",
]
