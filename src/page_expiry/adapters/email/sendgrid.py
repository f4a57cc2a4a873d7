"""Email adapter using the SendGrid v3 HTTP API."""

import logging

import httpx

from ...domain.errors import EmailDeliveryError
from ...domain.models import DeliveryReceipt
from .base import BaseEmailTransport
from .templates import EmailData

logger = logging.getLogger(__name__)


class SendGridTransport(BaseEmailTransport):
    """Transport posting messages to SendGrid."""

    service_name = "SendGrid"

    def __init__(
        self,
        api_key: str,
        from_address: str,
        from_name: str,
        url: str = "https://api.sendgrid.com/v3/mail/send",
        timeout: float = 30.0,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("SendGrid API key is required")
        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name
        self.url = url
        self.timeout = timeout
        self.http_transport = http_transport

    def build_payload(self, email: EmailData) -> dict:
        return {
            "personalizations": [{"to": [{"email": email.to_email}]}],
            "from": {"email": self.from_address, "name": self.from_name},
            "subject": email.subject,
            "content": [
                {"type": "text/plain", "value": email.text_body},
                {"type": "text/html", "value": email.html_body},
            ],
        }

    async def deliver(self, email: EmailData) -> DeliveryReceipt:
        logger.info(f"Sending email via SendGrid to {email.to_email}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.http_transport
            ) as client:
                response = await client.post(
                    self.url,
                    json=self.build_payload(email),
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmailDeliveryError(
                f"SendGrid error {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"Failed to send email: {e}") from e
        return DeliveryReceipt(success=True, message=f"Email successfully sent to {email.to_email}")
