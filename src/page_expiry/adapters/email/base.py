"""Shared behaviour of the email transports."""

from abc import abstractmethod
from datetime import datetime

from ...domain.models import DeliveryReceipt, PageSummary
from ...ports.email import EmailTransport
from .templates import EmailData, build_expiry_alert, build_test_email


class BaseEmailTransport(EmailTransport):
    """Renders messages and leaves delivery to subclasses."""

    service_name = "Unknown"

    @abstractmethod
    async def deliver(self, email: EmailData) -> DeliveryReceipt:
        """Deliver a rendered message; raise EmailDeliveryError on failure."""
        pass

    async def send_expiry_alert(self, recipient: str, summary: PageSummary) -> DeliveryReceipt:
        return await self.deliver(build_expiry_alert(recipient, summary))

    async def send_test_email(self, recipient: str) -> DeliveryReceipt:
        return await self.deliver(build_test_email(recipient, self.service_name, datetime.now()))
