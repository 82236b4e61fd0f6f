"""
Delivery Channels
=================
Pluggable transports for OTP and security notification messages.
"""

from .exceptions import DeliveryError, TransientDeliveryError, PermanentDeliveryError
from .base import DeliveryChannel, DeliveryReceipt
from .config import SMTPConfig, TwilioConfig
from .smtp import SMTPEmailChannel
from .twilio import TwilioSMSChannel
from .in_memory import InMemoryChannel, SentMessage

__all__ = [
    # Exceptions
    "DeliveryError",
    "TransientDeliveryError",
    "PermanentDeliveryError",
    # Base
    "DeliveryChannel",
    "DeliveryReceipt",
    # Config
    "SMTPConfig",
    "TwilioConfig",
    # Channels
    "SMTPEmailChannel",
    "TwilioSMSChannel",
    "InMemoryChannel",
    "SentMessage",
]
