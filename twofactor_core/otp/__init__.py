"""
OTP Issuance and Verification
=============================
One-time passcode lifecycle: generation, storage, delivery and
single-use verification.
"""

from .models import (
    OTPConfig,
    OTPRecord,
    VerifyResult,
    DeliveryStatus,
    SecurityMethod,
    NotificationEvent,
    IssueResult,
)
from .exceptions import (
    OTPError,
    EntropyUnavailable,
    RecordNotFound,
    CodeExpired,
    TooManyAttempts,
    AlreadyConsumed,
    InvalidCode,
    DeliveryFailed,
)
from .codes import generate_numeric_code, codes_match, mask_recipient
from .generator import CodeGenerator
from .store import OTPStore, InMemoryOTPStore, utc_now
from .service import OTPService

__all__ = [
    # Models
    "OTPConfig",
    "OTPRecord",
    "VerifyResult",
    "DeliveryStatus",
    "SecurityMethod",
    "NotificationEvent",
    "IssueResult",
    # Exceptions
    "OTPError",
    "EntropyUnavailable",
    "RecordNotFound",
    "CodeExpired",
    "TooManyAttempts",
    "AlreadyConsumed",
    "InvalidCode",
    "DeliveryFailed",
    # Codes
    "generate_numeric_code",
    "codes_match",
    "mask_recipient",
    # Components
    "CodeGenerator",
    "OTPStore",
    "InMemoryOTPStore",
    "utc_now",
    "OTPService",
]
