"""Email adapter that only logs messages."""

import logging

from ...domain.models import DeliveryReceipt
from .base import BaseEmailTransport
from .templates import EmailData

logger = logging.getLogger(__name__)


class SimulatedTransport(BaseEmailTransport):
    """Transport used when no real email service is configured."""

    service_name = "Simulated"

    def __init__(self) -> None:
        self.outbox: list[EmailData] = []

    async def deliver(self, email: EmailData) -> DeliveryReceipt:
        logger.info(f"Simulating email to {email.to_email}: {email.subject}")
        self.outbox.append(email)
        return DeliveryReceipt(
            success=True,
            message=f"Email successfully sent to {email.to_email} (simulated)",
        )
