"""Infrastructure services: email delivery and security event recording."""

from medboard.infrastructure.services.email_dispatcher import (
    LogOnlyEmailDispatcher,
    SmtpEmailDispatcher,
    build_email_dispatcher,
)
from medboard.infrastructure.services.security_event_sink import LoggingSecurityEventSink

__all__ = [
    "LogOnlyEmailDispatcher",
    "LoggingSecurityEventSink",
    "SmtpEmailDispatcher",
    "build_email_dispatcher",
]
