"""E-mail notifiers: SMTP delivery and a development log sink."""

from email.message import EmailMessage

import aiosmtplib
import structlog

from intern_registry.config import Settings
from intern_registry.core.exceptions import NotificationDeliveryException
from intern_registry.domain.gateways import Notifier
from intern_registry.infrastructure.brevo_api import BrevoNotifier

logger = structlog.get_logger(__name__)


class SMTPNotifier:
    """Sends plain-text e-mail over SMTP with STARTTLS."""

    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.username = settings.SMTP_USER or None
        self.password = settings.SMTP_PASSWORD or None
        self.start_tls = settings.SMTP_START_TLS
        self.from_header = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM}>"

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self.from_header
        message["To"] = recipient_email
        message["Subject"] = subject
        message.set_content(body)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.start_tls,
                timeout=30,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery failed", to=recipient_email, error=str(e))
            raise NotificationDeliveryException(
                "Failed to send e-mail", {"recipient": recipient_email, "reason": str(e)}
            ) from e
        logger.info("E-mail sent via SMTP", to=recipient_email)


class LogNotifier:
    """Development notifier: writes the message to the log instead of sending it."""

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        logger.warning("E-mail not sent (log notifier)", to=recipient_email, subject=subject, body=body)


def build_notifier(settings: Settings) -> Notifier:
    backend = settings.NOTIFIER_BACKEND.lower()
    if backend == "smtp":
        return SMTPNotifier(settings)
    if backend == "brevo":
        return BrevoNotifier(settings)
    if backend == "log":
        if settings.is_production:
            raise ValueError("NOTIFIER_BACKEND=log would write login links to the production logs")
        return LogNotifier()
    raise ValueError(f"Unknown NOTIFIER_BACKEND: {settings.NOTIFIER_BACKEND}")
