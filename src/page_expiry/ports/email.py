"""Email transport port - interface for alert delivery."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import DeliveryReceipt, PageSummary


class EmailTransport(ABC):
    """Interface for sending expiry alerts."""

    @abstractmethod
    async def send_expiry_alert(
        self, recipient: str, summary: "PageSummary"
    ) -> "DeliveryReceipt":
        """Send one expiry alert.

        May raise; the caller decides how failures are tallied.
        """
        pass
