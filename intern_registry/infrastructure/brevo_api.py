"""Brevo transactional e-mail HTTP client.

Retries on rate limiting and server errors with a growing delay; any other
failure surfaces as NotificationDeliveryException.
"""

import asyncio

import httpx
import structlog

from intern_registry.config import Settings
from intern_registry.core.exceptions import NotificationDeliveryException

logger = structlog.get_logger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


class BrevoNotifier:
    """Sends e-mail through the Brevo ``/smtp/email`` endpoint."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = settings.BREVO_API_URL.rstrip("/")
        self.sender = {"name": settings.EMAIL_FROM_NAME, "email": settings.EMAIL_FROM}
        self.headers = {
            "api-key": settings.BREVO_API_KEY,
            "accept": "application/json",
            "content-type": "application/json",
        }
        self.transport = transport
        self.max_retries = 3
        self.retry_delay = 2  # seconds

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        url = f"{self.base_url}/smtp/email"
        payload = {
            "sender": self.sender,
            "to": [{"email": recipient_email}],
            "subject": subject,
            "textContent": body,
        }

        last_error = None
        for attempt in range(1, self.max_retries + 1):
            try:
                async with httpx.AsyncClient(timeout=30, transport=self.transport) as client:
                    response = await client.post(url, json=payload, headers=self.headers)
                    response.raise_for_status()
                logger.info("E-mail sent via Brevo", to=recipient_email, attempt=attempt)
                return
            except httpx.HTTPStatusError as e:
                last_error = e
                logger.warning(
                    "Brevo API error",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    status_code=e.response.status_code,
                    body=e.response.text[:200],
                )
                if e.response.status_code not in RETRYABLE_STATUS:
                    break
            except httpx.HTTPError as e:
                last_error = e
                logger.warning("Brevo connection error", attempt=attempt, error=str(e))

            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay * attempt)

        raise NotificationDeliveryException(
            "Failed to send e-mail",
            {"recipient": recipient_email, "reason": str(last_error)},
        )
