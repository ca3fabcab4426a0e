"""
Prometheus metrics for the feedback intake pipeline.

Tracks submission outcomes, insert latency, and the number of
client keys held by the in-process rate limiter. Metrics are exposed
via a separate HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

SUBMISSION_OUTCOMES = ("created", "validation_failed", "rate_limited", "store_error")


class MetricsCollector:
    """
    Prometheus metrics collector for feedback submissions.

    Usage:
        metrics = get_metrics()
        metrics.start_server(port=8000)
        metrics.record_submission("created")
        metrics.record_insert_latency(0.012)
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.submissions = Counter(
            "feedback_submissions_total",
            "Feedback submissions by outcome",
            ["outcome"],  # created, validation_failed, rate_limited, store_error
            registry=self.registry,
        )

        self.insert_latency = Histogram(
            "feedback_insert_latency_seconds",
            "Time to persist a feedback record",
            buckets=LATENCY_BUCKETS,
            registry=self.registry,
        )

        self.rate_limit_keys = Gauge(
            "feedback_rate_limit_keys",
            "Client keys currently tracked by the rate limiter",
            registry=self.registry,
        )

    def start_server(self, port: int = 8000) -> None:
        """Start the Prometheus scrape endpoint on its own port."""
        start_http_server(port, registry=self.registry)
        logger.info("Metrics server started on port %d", port)

    def record_submission(self, outcome: str) -> None:
        """
        Count one submission outcome.

        Args:
            outcome: One of SUBMISSION_OUTCOMES
        """
        if outcome not in SUBMISSION_OUTCOMES:
            raise ValueError(f"Unknown submission outcome {outcome!r}")
        self.submissions.labels(outcome=outcome).inc()

    def record_insert_latency(self, latency: float) -> None:
        self.insert_latency.observe(latency)

    def set_rate_limit_keys(self, count: int) -> None:
        self.rate_limit_keys.set(count)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
