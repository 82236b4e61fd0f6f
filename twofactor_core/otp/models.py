"""
OTP Models
==========
Data models and enums for OTP issuance, verification and notifications.
"""

import os
from datetime import datetime, timedelta
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum


class VerifyResult(str, Enum):
    """Outcome of a verification attempt."""
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    NOT_FOUND = "not_found"
    ALREADY_CONSUMED = "already_consumed"


class DeliveryStatus(str, Enum):
    """Outcome of a single message delivery."""
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"


class SecurityMethod(str, Enum):
    """Second-factor methods announced in security notifications."""
    EMAIL = "email"
    AUTHENTICATOR_APP = "authenticator_app"

    @property
    def label(self) -> str:
        if self is SecurityMethod.EMAIL:
            return "Email OTP"
        return "Authenticator App"

    @classmethod
    def from_value(cls, value) -> "SecurityMethod":
        """
        Accept an enum member or a loose method string.

        Anything other than "email" is treated as an authenticator app.
        """
        if isinstance(value, cls):
            return value
        if str(value).strip().lower() == cls.EMAIL.value:
            return cls.EMAIL
        return cls.AUTHENTICATOR_APP


@dataclass
class OTPConfig:
    """Configuration for OTP issuance and verification."""
    length: int = 6
    validity_seconds: int = 600  # 10 minutes
    max_attempts: int = 5
    delivery_timeout_seconds: float = 15.0
    delivery_retries: int = 2  # Extra attempts on transient errors
    retry_base_delay: float = 0.5

    def __post_init__(self):
        if self.length < 1:
            raise ValueError("OTP length must be at least 1")
        if self.validity_seconds <= 0:
            raise ValueError("validity_seconds must be positive")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delivery_timeout_seconds <= 0:
            raise ValueError("delivery_timeout_seconds must be positive")
        if self.delivery_retries < 0:
            raise ValueError("delivery_retries cannot be negative")

    @property
    def validity_window(self) -> timedelta:
        return timedelta(seconds=self.validity_seconds)

    @classmethod
    def from_env(cls) -> "OTPConfig":
        """Build a config from OTP_* environment variables."""
        return cls(
            length=int(os.getenv("OTP_LENGTH", "6")),
            validity_seconds=int(os.getenv("OTP_VALIDITY_SECONDS", "600")),
            max_attempts=int(os.getenv("OTP_MAX_ATTEMPTS", "5")),
            delivery_timeout_seconds=float(os.getenv("OTP_DELIVERY_TIMEOUT", "15")),
            delivery_retries=int(os.getenv("OTP_DELIVERY_RETRIES", "2")),
        )


@dataclass
class OTPRecord:
    """One outstanding verification challenge."""
    account_id: str
    code: str = field(repr=False)
    issued_at: datetime
    expires_at: datetime
    max_attempts: int
    attempt_count: int = 0
    consumed: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    @property
    def is_locked(self) -> bool:
        return self.attempt_count >= self.max_attempts

    def is_active(self, now: datetime) -> bool:
        return not self.consumed and not self.is_locked and not self.is_expired(now)


@dataclass
class NotificationEvent:
    """A one-shot security notification; never persisted."""
    recipient: str
    display_name: str
    method: SecurityMethod


@dataclass
class IssueResult:
    """What the caller learns about an issuance or resend."""
    issued: bool
    delivery_status: Optional[DeliveryStatus] = None
    expires_at: Optional[datetime] = None
    error: Optional[str] = None  # Error class name, never the code

    @property
    def delivered(self) -> bool:
        return self.delivery_status == DeliveryStatus.DELIVERED
