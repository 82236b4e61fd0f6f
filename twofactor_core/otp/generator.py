"""
Code Generator
==============
Fixed-length numeric code generation from the OS randomness source.
"""

from typing import Optional
import structlog

from .codes import generate_numeric_code
from .exceptions import EntropyUnavailable
from .models import OTPConfig

logger = structlog.get_logger(__name__)


class CodeGenerator:
    """
    Produces N-digit numeric codes.

    If the CSPRNG fails, issuance fails. Never falls back to ``random``.
    """

    def __init__(self, length: Optional[int] = None, config: Optional[OTPConfig] = None):
        self.length = length if length is not None else (config or OTPConfig()).length
        if self.length < 1:
            raise ValueError("Code length must be at least 1")

    def generate(self) -> str:
        """
        Generate a new code.

        Raises:
            EntropyUnavailable: If the secure random source is unavailable
        """
        try:
            return generate_numeric_code(self.length)
        except (OSError, NotImplementedError) as e:
            logger.error("Secure random source unavailable", error=type(e).__name__)
            raise EntropyUnavailable("Secure random source unavailable") from e
