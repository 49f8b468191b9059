"""Brevo transactional email client.

Sending is a logged no-op when no API key is configured so local
development and tests never reach the network.
"""

import httpx
import structlog

from angelic.core.config import get_settings

logger = structlog.get_logger(__name__)


class BrevoClient:
    """Minimal client for Brevo's ``/v3/smtp/email`` endpoint."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = get_settings()
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.settings.brevo_api_key.strip())

    async def send(self, to: str, subject: str, html: str, text: str | None = None) -> bool:
        """Send one email.

        Returns:
            True when Brevo accepted the message, False otherwise (including
            when sending is disabled)
        """
        if not self.configured:
            logger.info("email_send_skipped", reason="brevo_not_configured", subject=subject)
            return False

        payload = {
            "sender": {"email": self.settings.email_from, "name": self.settings.email_from_name},
            "to": [{"email": to}],
            "subject": subject,
            "htmlContent": html,
        }
        if text:
            payload["textContent"] = text

        headers = {
            "accept": "application/json",
            "api-key": self.settings.brevo_api_key.strip(),
            "content-type": "application/json",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=15.0) as client:
                response = await client.post(self.settings.brevo_api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("email_send_failed", recipient=to, error=str(exc), error_type=type(exc).__name__)
            return False

        if response.status_code != 201:
            logger.error("email_send_rejected", recipient=to, status_code=response.status_code, body=response.text[:500])
            return False

        logger.info("email_sent", recipient=to, message_id=response.json().get("messageId"))
        return True
