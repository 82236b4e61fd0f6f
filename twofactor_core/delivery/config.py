"""
Delivery Channel Configuration
==============================
Explicit transport settings passed into channel constructors.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_SENDER_NAME = "CampusOne"
DEFAULT_SENDER_ADDRESS = "noreply@campusone.edu"


@dataclass
class SMTPConfig:
    """
    SMTP transport settings.

    Attributes:
        host: SMTP server hostname
        port: SMTP server port (587 for STARTTLS, 465 for implicit TLS)
        use_implicit_tls: Open the connection over TLS (SMTP_SSL). When
            False, STARTTLS is negotiated if the server offers it.
        auth_user: Login name; no AUTH is attempted when empty
        auth_secret: Login password
        sender_name: Display name in the From header
        sender_address: From address; defaults to auth_user, then to
            DEFAULT_SENDER_ADDRESS
        timeout: Socket timeout in seconds for connect and each command
    """
    host: str = "smtp.gmail.com"
    port: int = 587
    use_implicit_tls: bool = False
    auth_user: Optional[str] = None
    auth_secret: Optional[str] = field(default=None, repr=False)
    sender_name: str = DEFAULT_SENDER_NAME
    sender_address: Optional[str] = None
    timeout: float = 10.0

    def __post_init__(self):
        if not self.host:
            raise ValueError("SMTP host is required")
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid SMTP port: {self.port}")
        if self.auth_user and not self.auth_secret:
            raise ValueError("auth_secret is required when auth_user is set")

    @property
    def from_address(self) -> str:
        return self.sender_address or self.auth_user or DEFAULT_SENDER_ADDRESS

    @property
    def from_header(self) -> str:
        return f'"{self.sender_name}" <{self.from_address}>'

    @classmethod
    def from_env(cls) -> "SMTPConfig":
        """Build a config from SMTP_* environment variables."""
        return cls(
            host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            port=int(os.getenv("SMTP_PORT", "587")),
            use_implicit_tls=os.getenv("SMTP_SECURE", "false").lower() in ("1", "true", "yes"),
            auth_user=os.getenv("SMTP_USER") or None,
            auth_secret=os.getenv("SMTP_PASSWORD") or None,
            sender_name=os.getenv("SMTP_FROM_NAME", DEFAULT_SENDER_NAME),
            sender_address=os.getenv("SMTP_FROM") or None,
        )


@dataclass
class TwilioConfig:
    """
    Twilio Messages API settings.

    Attributes:
        account_sid: Twilio account SID (ACxxx)
        auth_token: Twilio auth token
        from_number: Sender number; ignored if messaging_service_sid is set
        messaging_service_sid: Optional messaging service (MGxxx)
        timeout: HTTP timeout in seconds
    """
    account_sid: str
    auth_token: str = field(repr=False)
    from_number: Optional[str] = None
    messaging_service_sid: Optional[str] = None
    timeout: float = 10.0

    def __post_init__(self):
        if not self.from_number and not self.messaging_service_sid:
            raise ValueError("from_number or messaging_service_sid is required")

    @property
    def base_url(self) -> str:
        return f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}"
