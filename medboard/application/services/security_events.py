"""Fire-and-forget security event emission shared by the auth services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from medboard.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from medboard.application.dtos.auth import SecurityEvent
    from medboard.application.interfaces.services import ISecurityEventSink

logger = get_logger(__name__)


def emit_security_event(sink: ISecurityEventSink | None, event: SecurityEvent) -> None:
    """Hand event to sink; a failing sink is logged and never changes the caller's outcome."""
    if sink is None:
        return
    try:
        sink.record(event)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Security event sink failed for %s: %s", event.event_type.value, exc
        )
