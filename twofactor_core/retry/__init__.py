"""
Delivery Retry
==============
Exponential backoff around channel sends.
"""

from .exceptions import RetryExhausted
from .backoff import BackoffPolicy, send_with_backoff

__all__ = [
    "BackoffPolicy",
    "RetryExhausted",
    "send_with_backoff",
]
