"""Account-status gating applied on every login, refresh and authenticated request."""

from medboard.domain.enums import UserRole
from medboard.domain.exceptions import AccountDisabledException, PendingApprovalException


def is_gated(role: str) -> bool:
    """Return True when active/approved checks apply to this role (everyone but admin)."""
    return role != UserRole.ADMIN.value


def ensure_account_allowed(role: str, is_active: bool, is_approved: bool) -> None:
    """Raise if a non-admin account is deactivated or still pending approval.

    Deactivation is checked first: a disabled account that was never approved
    reports AccountDisabled.
    """
    if not is_gated(role):
        return
    if not is_active:
        raise AccountDisabledException()
    if not is_approved:
        raise PendingApprovalException()
