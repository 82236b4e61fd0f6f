"""
OTP Code Utilities
==================
Secure code generation and comparison helpers.
"""

import secrets
import hmac


def generate_numeric_code(length: int = 6) -> str:
    """
    Generate a secure random numeric code.

    Args:
        length: Number of digits

    Returns:
        Zero-padded code, uniform over [0, 10**length)
    """
    return str(secrets.randbelow(10 ** length)).zfill(length)


def codes_match(submitted: str, expected: str) -> bool:
    """
    Compare a submitted code against the issued one.

    Uses constant-time comparison to prevent timing attacks.
    """
    if not isinstance(submitted, str):
        return False
    return hmac.compare_digest(submitted.strip().encode(), expected.encode())


def mask_recipient(recipient: str) -> str:
    """Mask an email address or phone number for logging."""
    if not recipient:
        return ""
    if "@" in recipient:
        local, _, domain = recipient.partition("@")
        return f"{local[:1]}***@{domain}"
    return f"***{recipient[-4:]}" if len(recipient) > 4 else "***"
