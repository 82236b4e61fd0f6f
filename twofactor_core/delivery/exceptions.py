"""
Delivery Exceptions
===================
Errors raised by delivery channels.
"""

from typing import Optional


class DeliveryError(Exception):
    """Base exception for all delivery channel errors."""

    retryable: bool = False

    def __init__(self, message: str, channel: str = "unknown", status_code: Optional[int] = None):
        self.message = message
        self.channel = channel
        self.status_code = status_code
        super().__init__(f"[{channel}] {message}")


class TransientDeliveryError(DeliveryError):
    """Raised when a send may succeed if retried (timeouts, 4xx SMTP, 5xx HTTP)."""
    retryable = True


class PermanentDeliveryError(DeliveryError):
    """Raised when retrying will not help (bad credentials, rejected recipient)."""
    retryable = False
