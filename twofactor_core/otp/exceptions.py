"""
OTP Exceptions
==============
Exception classes raised by the generator and the store.
"""

from typing import Optional


class OTPError(Exception):
    """Base exception for OTP operations."""

    def __init__(self, message: str, account_id: Optional[str] = None):
        super().__init__(message)
        self.account_id = account_id


class EntropyUnavailable(OTPError):
    """Raised when the secure random source cannot produce a code."""
    pass


class RecordNotFound(OTPError):
    """Raised when no challenge exists for the account."""
    pass


class CodeExpired(OTPError):
    """Raised when the challenge is past its expiry time."""
    pass


class TooManyAttempts(OTPError):
    """Raised when the failed-attempt cap has been reached."""
    pass


class AlreadyConsumed(OTPError):
    """Raised when the challenge was already verified once."""
    pass


class InvalidCode(OTPError):
    """Raised when the submitted code does not match; the attempt was counted."""

    def __init__(self, message: str, account_id: Optional[str] = None, attempt_count: int = 0):
        super().__init__(message, account_id=account_id)
        self.attempt_count = attempt_count


class DeliveryFailed(OTPError):
    """Raised when a message could not be handed to the delivery channel."""

    def __init__(
        self,
        message: str,
        account_id: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, account_id=account_id)
        self.cause = cause

    @property
    def error_class(self) -> str:
        return type(self.cause).__name__ if self.cause else type(self).__name__
