"""
OTP Service
===========
Issues challenges, verifies submitted codes and sends security
notifications.

The store write always happens before delivery starts, and no store lock is
held while a message is in flight.
"""

import asyncio
import math
import time
from datetime import timedelta
from typing import Optional, Tuple
import structlog

from ..delivery.base import DeliveryChannel
from ..delivery.exceptions import DeliveryError
from ..metrics import OTPMetrics
from ..retry import BackoffPolicy, RetryExhausted, send_with_backoff
from ..templates import BrandConfig, MessageKind, RenderedMessage, TemplateError, format_validity, render_message
from .codes import mask_recipient
from .exceptions import (
    AlreadyConsumed,
    CodeExpired,
    DeliveryFailed,
    InvalidCode,
    RecordNotFound,
    TooManyAttempts,
)
from .generator import CodeGenerator
from .models import (
    DeliveryStatus,
    IssueResult,
    NotificationEvent,
    OTPConfig,
    SecurityMethod,
    VerifyResult,
)
from .store import OTPStore

logger = structlog.get_logger(__name__)


class OTPService:
    """
    OTP lifecycle orchestration.

    Example:
        service = OTPService(InMemoryOTPStore(), SMTPEmailChannel(SMTPConfig.from_env()))

        result = await service.issue("user-42", "ann@example.com", "Ann")
        if result.delivery_status == DeliveryStatus.DELIVERY_FAILED:
            ...  # offer a resend; the code is still valid

        outcome = await service.verify("user-42", submitted)
    """

    def __init__(
        self,
        store: OTPStore,
        channel: DeliveryChannel,
        config: Optional[OTPConfig] = None,
        generator: Optional[CodeGenerator] = None,
        metrics: Optional[OTPMetrics] = None,
        brand: Optional[BrandConfig] = None,
    ):
        self.store = store
        self.channel = channel
        self.config = config or OTPConfig()
        self.generator = generator or CodeGenerator(config=self.config)
        self.metrics = metrics or OTPMetrics()
        self.brand = brand or BrandConfig()
        self.backoff = BackoffPolicy(
            attempts=self.config.delivery_retries + 1,
            base_delay=self.config.retry_base_delay,
        )

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    async def issue(self, account_id: str, recipient: str, display_name: str) -> IssueResult:
        """
        Generate, store and deliver a new code.

        Any earlier code for the account stops validating as soon as the new
        one is stored. A delivery failure is reported in the result but the
        stored code stays valid.

        Raises:
            EntropyUnavailable: If no secure code could be generated
        """
        code = self.generator.generate()
        message = self._render_code(code, display_name, self.config.validity_window)
        record = await self.store.put(
            account_id,
            code,
            self.config.validity_window,
            max_attempts=self.config.max_attempts,
        )
        self.metrics.record_issue()

        logger.info(
            "OTP issued",
            account_id=account_id,
            expires_at=record.expires_at.isoformat(),
        )

        status, error = await self._deliver_code(recipient, message)
        return IssueResult(
            issued=True,
            delivery_status=status,
            expires_at=record.expires_at,
            error=error,
        )

    async def resend(self, account_id: str, recipient: str, display_name: str) -> IssueResult:
        """
        Deliver the current code again without re-issuing it.

        The message quotes the remaining validity, rounded up to whole
        minutes.
        """
        try:
            record = await self.store.get(account_id)
        except RecordNotFound:
            return IssueResult(issued=False, error="NotFound")

        now = self.store.now()
        if record.consumed:
            return IssueResult(issued=False, error="AlreadyConsumed")
        if record.is_expired(now):
            return IssueResult(issued=False, error="Expired")
        if record.is_locked:
            return IssueResult(issued=False, error="TooManyAttempts")

        remaining = timedelta(minutes=math.ceil((record.expires_at - now).total_seconds() / 60))
        message = self._render_code(record.code, display_name, remaining)
        status, error = await self._deliver_code(recipient, message)
        return IssueResult(
            issued=False,
            delivery_status=status,
            expires_at=record.expires_at,
            error=error,
        )

    def _render_code(self, code: str, display_name: Optional[str], validity: timedelta) -> RenderedMessage:
        return render_message(
            MessageKind.OTP_CHALLENGE,
            {
                "display_name": display_name,
                "code": code,
                "validity": format_validity(validity),
            },
            brand=self.brand,
        )

    async def _deliver_code(self, recipient: str, message: RenderedMessage) -> Tuple[DeliveryStatus, Optional[str]]:
        try:
            await self._send(MessageKind.OTP_CHALLENGE, recipient, message)
        except DeliveryFailed as e:
            return DeliveryStatus.DELIVERY_FAILED, e.error_class
        return DeliveryStatus.DELIVERED, None

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    async def verify(self, account_id: str, submitted_code: str) -> VerifyResult:
        """
        Check a submitted code.

        A code verifies at most once. Expired and locked challenges never
        verify, and expired ones do not count attempts. The result carries
        no hint about how close a wrong code was.
        """
        try:
            await self.store.check_and_consume(account_id, submitted_code)
            result = VerifyResult.VALID
        except RecordNotFound:
            result = VerifyResult.NOT_FOUND
        except AlreadyConsumed:
            result = VerifyResult.ALREADY_CONSUMED
        except CodeExpired:
            result = VerifyResult.EXPIRED
        except TooManyAttempts:
            result = VerifyResult.TOO_MANY_ATTEMPTS
        except InvalidCode as e:
            logger.info("Invalid OTP attempt", account_id=account_id, attempts=e.attempt_count)
            result = VerifyResult.INVALID

        self.metrics.record_verification(result.value)

        if result == VerifyResult.VALID:
            logger.info("OTP verified", account_id=account_id)
        elif result != VerifyResult.INVALID:
            logger.warning("OTP verification rejected", account_id=account_id, result=result.value)

        return result

    async def revoke(self, account_id: str) -> bool:
        """Drop any outstanding challenge for the account."""
        removed = await self.store.delete(account_id)
        if removed:
            logger.info("OTP challenge revoked", account_id=account_id)
        return removed

    # ------------------------------------------------------------------
    # Security notifications
    # ------------------------------------------------------------------

    async def notify_security_event(
        self,
        recipient: str,
        display_name: str,
        method,
    ) -> DeliveryStatus:
        """
        Tell the user that 2FA was enabled.

        Never touches OTP state; a failure is reported, not raised.

        Args:
            method: SecurityMethod or a method string ("email" for Email OTP,
                anything else for an authenticator app)
        """
        event = NotificationEvent(
            recipient=recipient,
            display_name=display_name,
            method=SecurityMethod.from_value(method),
        )
        try:
            message = render_message(
                MessageKind.TWO_FACTOR_ENABLED,
                {"display_name": event.display_name, "method": event.method},
                brand=self.brand,
            )
        except TemplateError as e:
            self.metrics.record_delivery(
                MessageKind.TWO_FACTOR_ENABLED.value,
                DeliveryStatus.DELIVERY_FAILED.value,
                0.0,
            )
            logger.error(
                "Security notification not rendered",
                recipient=mask_recipient(recipient),
                error=str(e),
            )
            return DeliveryStatus.DELIVERY_FAILED

        try:
            await self._send(MessageKind.TWO_FACTOR_ENABLED, event.recipient, message)
        except DeliveryFailed:
            return DeliveryStatus.DELIVERY_FAILED
        return DeliveryStatus.DELIVERED

    # Caller-facing names
    issue_challenge = issue
    verify_challenge = verify
    announce_security_event = notify_security_event

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def _send(self, kind: MessageKind, recipient: str, message: RenderedMessage) -> None:
        """
        Send with retries on transient errors, bounded by the delivery timeout.

        Raises:
            DeliveryFailed: On timeout, exhausted retries or any channel error
        """
        started = time.perf_counter()
        cause: Optional[Exception] = None

        try:
            await asyncio.wait_for(
                send_with_backoff(
                    self.channel,
                    recipient,
                    message.subject,
                    message.html,
                    message.text,
                    policy=self.backoff,
                ),
                timeout=self.config.delivery_timeout_seconds,
            )
        except RetryExhausted as e:
            cause = e.last_exception or e
        except asyncio.TimeoutError as e:
            cause = e
        except DeliveryError as e:
            cause = e
        except Exception as e:
            # Channels outside this package may raise anything
            cause = e

        duration = time.perf_counter() - started

        if cause is None:
            self.metrics.record_delivery(kind.value, DeliveryStatus.DELIVERED.value, duration)
            logger.info(
                "Message delivered",
                kind=kind.value,
                channel=self.channel.name,
                recipient=mask_recipient(recipient),
            )
            return

        self.metrics.record_delivery(kind.value, DeliveryStatus.DELIVERY_FAILED.value, duration)
        logger.error(
            "Message delivery failed",
            kind=kind.value,
            channel=self.channel.name,
            recipient=mask_recipient(recipient),
            error=type(cause).__name__,
            retryable=getattr(cause, "retryable", isinstance(cause, asyncio.TimeoutError)),
        )
        raise DeliveryFailed("Message delivery failed", cause=cause) from cause
