"""
OTP Metrics
===========
Prometheus counters for issuance, verification and delivery.
"""

from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class OTPMetrics:
    """
    Metric set bound to one registry.

    Each instance gets a private registry unless one is passed in, so
    several services (or tests) can coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.issued = Counter(
            name="otp_issued_total",
            documentation="OTP challenges stored",
            registry=self.registry,
        )

        self.verifications = Counter(
            name="otp_verifications_total",
            documentation="OTP verification outcomes",
            labelnames=["result"],
            registry=self.registry,
        )

        self.deliveries = Counter(
            name="otp_deliveries_total",
            documentation="Message deliveries by kind and status",
            labelnames=["kind", "status"],
            registry=self.registry,
        )

        self.delivery_duration = Histogram(
            name="otp_delivery_duration_seconds",
            documentation="Time spent delivering a message, retries included",
            labelnames=["kind"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )

    def record_issue(self) -> None:
        self.issued.inc()

    def record_verification(self, result: str) -> None:
        self.verifications.labels(result=result).inc()

    def record_delivery(self, kind: str, status: str, duration_seconds: float) -> None:
        self.deliveries.labels(kind=kind, status=status).inc()
        self.delivery_duration.labels(kind=kind).observe(duration_seconds)

    def get_sample(self, name: str, labels: Optional[dict] = None) -> float:
        """Current value of a sample, 0.0 if it was never recorded."""
        value = self.registry.get_sample_value(name, labels or {})
        return value or 0.0

    def export(self) -> bytes:
        """Prometheus text exposition for this registry."""
        return generate_latest(self.registry)
