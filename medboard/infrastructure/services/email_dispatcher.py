"""Password reset email delivery.

LogOnlyEmailDispatcher is used when SMTP is not configured (dev, tests).
SmtpEmailDispatcher sends via smtplib in a worker thread; failures raise and are
logged by the background runner that schedules the send.
"""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from datetime import datetime
from email.message import EmailMessage
from urllib.parse import urlencode

from medboard.core.config import Settings
from medboard.shared.telemetry.logging import get_logger
from medboard.shared.utils.sanitization import redact_email

logger = get_logger(__name__)

RESET_SUBJECT = "Reset your medboard password"


def build_reset_link(frontend_base_url: str, raw_token: str) -> str:
    """Return the frontend URL that carries the raw reset token."""
    return f"{frontend_base_url.rstrip('/')}/reset-password?{urlencode({'token': raw_token})}"


def _reset_body(link: str, expires_at: datetime) -> str:
    return (
        "We received a request to reset the password of your medboard account.\n\n"
        f"Open this link to choose a new password:\n{link}\n\n"
        f"The link expires at {expires_at.strftime('%Y-%m-%d %H:%M UTC')} and can be used once.\n"
        "If you did not request a reset, you can ignore this email."
    )


class LogOnlyEmailDispatcher:
    """IEmailDispatcher implementation that logs instead of sending email."""

    def __init__(self, frontend_base_url: str = "http://localhost:5000") -> None:
        self._frontend_base_url = frontend_base_url

    async def send_password_reset_email(
        self, to: str, raw_token: str, expires_at: datetime
    ) -> None:
        """Log the reset email; the link itself is logged only at DEBUG."""
        logger.info(
            "Password reset email: would send to %s (expires %s)",
            redact_email(to),
            expires_at.isoformat(),
        )
        logger.debug("Password reset link: %s", build_reset_link(self._frontend_base_url, raw_token))


class SmtpEmailDispatcher:
    """IEmailDispatcher implementation over SMTP (STARTTLS or implicit TLS)."""

    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        from_email: str,
        frontend_base_url: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._from_email = from_email
        self._frontend_base_url = frontend_base_url
        self._timeout_seconds = timeout_seconds

    async def send_password_reset_email(
        self, to: str, raw_token: str, expires_at: datetime
    ) -> None:
        msg = EmailMessage()
        msg["Subject"] = RESET_SUBJECT
        msg["From"] = self._from_email
        msg["To"] = to
        msg.set_content(_reset_body(build_reset_link(self._frontend_base_url, raw_token), expires_at))
        await asyncio.to_thread(self._send, msg)
        logger.info("Password reset email sent to %s", redact_email(to))

    def _send(self, msg: EmailMessage) -> None:
        context = ssl.create_default_context()
        if self._use_tls:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout_seconds) as server:
                server.starttls(context=context)
                if self._username and self._password:
                    server.login(self._username, self._password)
                server.send_message(msg)
        else:
            with smtplib.SMTP_SSL(
                self._host, self._port, context=context, timeout=self._timeout_seconds
            ) as server:
                if self._username and self._password:
                    server.login(self._username, self._password)
                server.send_message(msg)


def build_email_dispatcher(settings: Settings) -> LogOnlyEmailDispatcher | SmtpEmailDispatcher:
    """Return an SMTP dispatcher when SMTP_HOST is set, else the log-only one."""
    if not settings.smtp_host:
        return LogOnlyEmailDispatcher(settings.frontend_base_url)
    return SmtpEmailDispatcher(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_password.get_secret_value() if settings.smtp_password else "",
        use_tls=settings.smtp_use_tls,
        from_email=settings.email_from,
        frontend_base_url=settings.frontend_base_url,
    )
