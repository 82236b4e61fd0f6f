"""
Delivery Channel Base
=====================
Abstract interface for pushing a rendered message to a user.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import structlog

logger = structlog.get_logger(__name__)


@dataclass
class DeliveryReceipt:
    """Result of a successful send."""
    channel: str
    recipient: str
    provider_message_id: Optional[str] = None


class DeliveryChannel(ABC):
    """
    Abstract base class for delivery channels (email, SMS, push).

    Implementations raise ``TransientDeliveryError`` or
    ``PermanentDeliveryError`` on failure and return a receipt on success.
    """

    name: str = "base"

    async def initialize(self) -> None:
        """Acquire resources (e.g., HTTP clients)."""
        logger.info("Delivery channel initialized", channel=self.name)

    async def close(self) -> None:
        """Release resources."""
        logger.info("Delivery channel closed", channel=self.name)

    @abstractmethod
    async def send(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> DeliveryReceipt:
        """
        Send a message.

        Args:
            recipient: Email address or E.164 phone number
            subject: Message subject (ignored by channels without one)
            body_html: HTML body
            body_text: Plain-text body with the same facts as the HTML

        Returns:
            DeliveryReceipt
        """

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
