"""
Delivery Backoff
================
Resends through a channel while it keeps reporting retryable failures.

A failure is retried only when the channel marks it ``retryable``
(``TransientDeliveryError``). Permanent errors and anything that is not a
``DeliveryError`` propagate on the first attempt.
"""

import asyncio
import random
from dataclasses import dataclass
import structlog

from ..delivery.base import DeliveryChannel, DeliveryReceipt
from ..delivery.exceptions import DeliveryError
from .exceptions import RetryExhausted

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BackoffPolicy:
    """
    Exponential backoff schedule for channel sends.

    attempts counts the first send, so ``attempts=3`` means two resends.
    """
    attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 10.0
    jitter: bool = True

    def __post_init__(self):
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must not be negative")

    def delay(self, attempt: int) -> float:
        """Pause after failed attempt number ``attempt`` (1-based)."""
        delay = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random()
        return delay


async def send_with_backoff(
    channel: DeliveryChannel,
    recipient: str,
    subject: str,
    body_html: str,
    body_text: str,
    policy: BackoffPolicy = BackoffPolicy(),
) -> DeliveryReceipt:
    """
    Send one message, resending on retryable delivery errors.

    Returns:
        The receipt from the first successful send

    Raises:
        RetryExhausted: If every attempt failed with a retryable error
        DeliveryError: On the first non-retryable delivery error
    """
    for attempt in range(1, policy.attempts + 1):
        try:
            return await channel.send(recipient, subject, body_html, body_text)
        except DeliveryError as e:
            if not e.retryable:
                raise

            if attempt == policy.attempts:
                logger.warning(
                    "Delivery retries exhausted",
                    channel=channel.name,
                    attempts=attempt,
                    status_code=e.status_code,
                    error=type(e).__name__,
                )
                raise RetryExhausted(
                    f"{channel.name} failed after {attempt} attempts",
                    last_exception=e,
                    attempts=attempt,
                ) from e

            delay = policy.delay(attempt)
            logger.info(
                "Resending after transient failure",
                channel=channel.name,
                attempt=attempt,
                delay=round(delay, 3),
                status_code=e.status_code,
            )
            await asyncio.sleep(delay)
