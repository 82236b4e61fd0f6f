"""
Two-Factor Core Library
=======================
One-time passcode issuance, delivery and verification for two-factor
authentication.
"""

__version__ = "0.1.0"

# OTP lifecycle
from twofactor_core.otp import (
    OTPService,
    OTPConfig,
    OTPRecord,
    CodeGenerator,
    OTPStore,
    InMemoryOTPStore,
    VerifyResult,
    DeliveryStatus,
    SecurityMethod,
    IssueResult,
    OTPError,
    EntropyUnavailable,
    DeliveryFailed,
)

# Delivery
from twofactor_core.delivery import (
    DeliveryChannel,
    DeliveryReceipt,
    DeliveryError,
    TransientDeliveryError,
    PermanentDeliveryError,
    SMTPConfig,
    SMTPEmailChannel,
    TwilioConfig,
    TwilioSMSChannel,
    InMemoryChannel,
)

# Templates
from twofactor_core.templates import (
    MessageKind,
    RenderedMessage,
    BrandConfig,
    render_message,
    format_validity,
)

# Metrics
from twofactor_core.metrics import OTPMetrics

# Logging
from twofactor_core.logging_config import setup_logging

__all__ = [
    "__version__",
    # OTP
    "OTPService",
    "OTPConfig",
    "OTPRecord",
    "CodeGenerator",
    "OTPStore",
    "InMemoryOTPStore",
    "VerifyResult",
    "DeliveryStatus",
    "SecurityMethod",
    "IssueResult",
    "OTPError",
    "EntropyUnavailable",
    "DeliveryFailed",
    # Delivery
    "DeliveryChannel",
    "DeliveryReceipt",
    "DeliveryError",
    "TransientDeliveryError",
    "PermanentDeliveryError",
    "SMTPConfig",
    "SMTPEmailChannel",
    "TwilioConfig",
    "TwilioSMSChannel",
    "InMemoryChannel",
    # Templates
    "MessageKind",
    "RenderedMessage",
    "BrandConfig",
    "render_message",
    "format_validity",
    # Metrics
    "OTPMetrics",
    # Logging
    "setup_logging",
]
