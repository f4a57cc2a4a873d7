"""Email adapter using SMTP with STARTTLS."""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage

from ...domain.errors import EmailDeliveryError
from ...domain.models import DeliveryReceipt
from .base import BaseEmailTransport
from .templates import EmailData

logger = logging.getLogger(__name__)


class SmtpTransport(BaseEmailTransport):
    """Transport delivering through an SMTP relay."""

    service_name = "SMTP"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_address: str,
        from_name: str,
        timeout: float = 30.0,
    ) -> None:
        if not host:
            raise ValueError("SMTP host is required")
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_address = from_address
        self.from_name = from_name
        self.timeout = timeout

    def build_message(self, email: EmailData) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = f"{self.from_name} <{self.from_address}>"
        msg["To"] = email.to_email
        msg["Subject"] = email.subject
        msg.set_content(email.text_body)
        msg.add_alternative(email.html_body, subtype="html")
        return msg

    def _send(self, msg: EmailMessage) -> None:
        context = ssl.create_default_context()
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls(context=context)
            if self.user:
                server.login(self.user, self.password)
            server.send_message(msg)

    async def deliver(self, email: EmailData) -> DeliveryReceipt:
        logger.info(f"Sending email via SMTP to {email.to_email}")
        try:
            # smtplib blocks; keep the event loop free
            await asyncio.to_thread(self._send, self.build_message(email))
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Failed to send email: {e}") from e
        return DeliveryReceipt(success=True, message=f"Email successfully sent to {email.to_email}")
