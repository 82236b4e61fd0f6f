"""
Shared fixtures for twofactor-core tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from twofactor_core.delivery import DeliveryChannel, DeliveryReceipt, InMemoryChannel, TransientDeliveryError
from twofactor_core.metrics import OTPMetrics
from twofactor_core.otp import CodeGenerator, InMemoryOTPStore, OTPConfig, OTPService


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FlakyChannel(DeliveryChannel):
    """Fails transiently a set number of times, then delivers."""

    name = "flaky"

    def __init__(self, failures: int):
        self.failures = failures
        self.attempts = 0

    async def send(self, recipient, subject, body_html, body_text):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise TransientDeliveryError("try again", channel=self.name, status_code=503)
        return DeliveryReceipt(channel=self.name, recipient=recipient)


class FixedCodeGenerator(CodeGenerator):
    """Hands out predetermined codes in order."""

    def __init__(self, *codes: str):
        super().__init__(length=len(codes[0]))
        self._codes = list(codes)

    def generate(self) -> str:
        return self._codes.pop(0) if len(self._codes) > 1 else self._codes[0]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return OTPConfig(delivery_timeout_seconds=2.0, retry_base_delay=0.001)


@pytest.fixture
def store(clock, config):
    return InMemoryOTPStore(max_attempts=config.max_attempts, clock=clock)


@pytest.fixture
def channel():
    return InMemoryChannel()


@pytest.fixture
def metrics():
    return OTPMetrics()


@pytest.fixture
def service(store, channel, config, metrics):
    return OTPService(store, channel, config=config, metrics=metrics)
