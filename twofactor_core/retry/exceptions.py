"""
Retry Exceptions
================
"""

from typing import Optional


class RetryExhausted(Exception):
    """Every send attempt failed with a retryable delivery error."""

    def __init__(self, message: str, last_exception: Optional[Exception] = None, attempts: int = 0):
        super().__init__(message)
        self.last_exception = last_exception
        self.attempts = attempts
