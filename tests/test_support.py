"""
Unit Tests for Backoff, Metrics, Logging and Configuration
==========================================================
"""

import logging

import pytest
import structlog

from conftest import FlakyChannel
from twofactor_core.delivery import InMemoryChannel, PermanentDeliveryError, TransientDeliveryError
from twofactor_core.logging_config import REDACTED, redact_secrets, setup_logging
from twofactor_core.metrics import OTPMetrics
from twofactor_core.otp import OTPConfig
from twofactor_core.retry import BackoffPolicy, RetryExhausted, send_with_backoff


class TestBackoff:
    """Tests for resending through a channel."""

    @pytest.mark.asyncio
    async def test_first_attempt_succeeds(self):
        """Should send once when the channel accepts the message."""
        channel = InMemoryChannel()

        receipt = await send_with_backoff(channel, "a@b.com", "Subject", "<p>hi</p>", "hi")

        assert receipt.channel == "memory"
        assert channel.attempts == 1

    @pytest.mark.asyncio
    async def test_resends_after_transient_failure(self):
        """Should resend on transient errors and eventually succeed."""
        channel = FlakyChannel(failures=2)
        policy = BackoffPolicy(attempts=5, base_delay=0.001)

        receipt = await send_with_backoff(channel, "a@b.com", "Subject", "<p>hi</p>", "hi", policy=policy)

        assert receipt.channel == "flaky"
        assert channel.attempts == 3

    @pytest.mark.asyncio
    async def test_exhausted(self):
        """Should raise after the last attempt, keeping the last error."""
        channel = FlakyChannel(failures=10)
        policy = BackoffPolicy(attempts=3, base_delay=0.001)

        with pytest.raises(RetryExhausted) as exc_info:
            await send_with_backoff(channel, "a@b.com", "Subject", "<p>hi</p>", "hi", policy=policy)

        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_exception, TransientDeliveryError)
        assert channel.attempts == 3

    @pytest.mark.asyncio
    async def test_permanent_error_not_resent(self):
        """Permanent delivery errors should propagate on the first attempt."""
        channel = InMemoryChannel(fail_with=PermanentDeliveryError("rejected", channel="memory"))

        with pytest.raises(PermanentDeliveryError):
            await send_with_backoff(
                channel, "a@b.com", "Subject", "<p>hi</p>", "hi",
                policy=BackoffPolicy(attempts=3, base_delay=0.001),
            )

        assert channel.attempts == 1

    def test_delay_schedule(self):
        policy = BackoffPolicy(base_delay=0.5, max_delay=3.0, jitter=False)

        assert [policy.delay(n) for n in (1, 2, 3, 4)] == [0.5, 1.0, 2.0, 3.0]

    def test_jitter_stays_in_range(self):
        policy = BackoffPolicy(base_delay=1.0)

        for _ in range(50):
            assert 0.5 <= policy.delay(1) <= 1.5

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            BackoffPolicy(attempts=0)


class TestMetrics:
    """Tests for the Prometheus metric set."""

    def test_instances_are_isolated(self):
        first = OTPMetrics()
        second = OTPMetrics()

        first.record_issue()

        assert first.get_sample("otp_issued_total") == 1
        assert second.get_sample("otp_issued_total") == 0

    def test_export(self):
        metrics = OTPMetrics()
        metrics.record_delivery("otp_challenge", "delivery_failed", 0.2)

        text = metrics.export().decode()

        assert 'otp_deliveries_total{kind="otp_challenge",status="delivery_failed"} 1.0' in text
        assert "otp_delivery_duration_seconds_count" in text


class TestLogging:
    """Tests for structured logging setup."""

    def test_redacts_sensitive_keys(self):
        event = {"event": "debug", "code": "482913", "auth_secret": "pw", "account_id": "u1"}

        result = redact_secrets(None, "info", event)

        assert result["code"] == REDACTED
        assert result["auth_secret"] == REDACTED
        assert result["account_id"] == "u1"

    def test_setup_logging_emits_json(self, capsys):
        try:
            logger = setup_logging("test-service", level="DEBUG", json_output=True)
            logger.info("Hello", code="482913")

            output = capsys.readouterr().out
            assert '"service": "test-service"' in output
            assert "482913" not in output
            assert REDACTED in output
        finally:
            structlog.reset_defaults()
            logging.getLogger().handlers.clear()


class TestOTPConfig:
    """Tests for OTP configuration."""

    def test_defaults(self):
        config = OTPConfig()

        assert config.length == 6
        assert config.max_attempts == 5
        assert config.validity_window.total_seconds() == 600

    @pytest.mark.parametrize("field,value", [
        ("length", 0),
        ("validity_seconds", 0),
        ("max_attempts", 0),
        ("delivery_timeout_seconds", 0),
        ("delivery_retries", -1),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValueError):
            OTPConfig(**{field: value})

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OTP_LENGTH", "8")
        monkeypatch.setenv("OTP_VALIDITY_SECONDS", "300")
        monkeypatch.setenv("OTP_MAX_ATTEMPTS", "3")

        config = OTPConfig.from_env()

        assert config.length == 8
        assert config.validity_seconds == 300
        assert config.max_attempts == 3
