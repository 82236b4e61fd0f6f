"""
In-Memory Channel
=================
Outbox channel for development and testing.
"""

from dataclasses import dataclass
from typing import List, Optional
import uuid

from .base import DeliveryChannel, DeliveryReceipt
from .exceptions import DeliveryError


@dataclass
class SentMessage:
    recipient: str
    subject: str
    body_html: str
    body_text: str


class InMemoryChannel(DeliveryChannel):
    """
    Keeps every sent message in ``outbox``.

    For development and testing only. Set ``fail_with`` to make every send
    raise that error instead.
    """

    name = "memory"

    def __init__(self, fail_with: Optional[DeliveryError] = None):
        self.fail_with = fail_with
        self.outbox: List[SentMessage] = []
        self.attempts = 0

    async def send(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str,
    ) -> DeliveryReceipt:
        self.attempts += 1
        if self.fail_with is not None:
            raise self.fail_with

        self.outbox.append(SentMessage(recipient, subject, body_html, body_text))
        return DeliveryReceipt(
            channel=self.name,
            recipient=recipient,
            provider_message_id=str(uuid.uuid4()),
        )

    @property
    def last_message(self) -> Optional[SentMessage]:
        return self.outbox[-1] if self.outbox else None
