"""Security event sink that writes structured log lines."""

from __future__ import annotations

import logging

from medboard.application.dtos.auth import SecurityEvent
from medboard.domain.enums import Severity
from medboard.shared.telemetry.logging import get_logger
from medboard.shared.utils.sanitization import redact_email

logger = get_logger("medboard.security")

_LEVELS = {
    Severity.LOW: logging.INFO,
    Severity.MEDIUM: logging.WARNING,
    Severity.HIGH: logging.WARNING,
}


class LoggingSecurityEventSink:
    """ISecurityEventSink that logs each event. Never raises."""

    def record(self, event: SecurityEvent) -> None:
        try:
            logger.log(
                _LEVELS.get(event.severity, logging.INFO),
                "security_event type=%s severity=%s user_id=%s email=%s ip=%s message=%s",
                event.event_type.value,
                event.severity.value,
                event.user_id or "-",
                redact_email(event.email) if event.email else "-",
                event.ip_address or "-",
                event.message,
            )
        except Exception:  # noqa: BLE001
            logger.exception("Failed to record security event")
