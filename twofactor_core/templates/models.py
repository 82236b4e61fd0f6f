"""
Template Models
===============
Message kinds, rendered output and branding.
"""

from dataclasses import dataclass
from enum import Enum


class MessageKind(str, Enum):
    """Kinds of messages the service sends."""
    OTP_CHALLENGE = "otp_challenge"
    TWO_FACTOR_ENABLED = "two_factor_enabled"


class TemplateError(ValueError):
    """Raised when a template cannot be rendered from the given fields."""
    pass


@dataclass(frozen=True)
class RenderedMessage:
    """Subject plus parallel HTML and plain-text bodies."""
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class BrandConfig:
    """Product naming used in subjects, headers and signatures."""
    product_name: str = "CampusOne"
    team_signature: str = "CampusOne Team"
    security_signature: str = "CampusOne Security Team"
