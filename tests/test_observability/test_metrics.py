"""Tests for the Prometheus metrics collector."""

import pytest
from prometheus_client import CollectorRegistry

from src.observability.metrics import MetricsCollector, get_metrics


@pytest.fixture
def metrics():
    return MetricsCollector(registry=CollectorRegistry())


class TestMetricsCollector:
    """Tests for MetricsCollector recording helpers."""

    def test_record_submission(self, metrics):
        metrics.record_submission("created")
        metrics.record_submission("created")
        metrics.record_submission("rate_limited")

        assert metrics.registry.get_sample_value(
            "feedback_submissions_total", {"outcome": "created"}
        ) == 2.0
        assert metrics.registry.get_sample_value(
            "feedback_submissions_total", {"outcome": "rate_limited"}
        ) == 1.0

    def test_unknown_outcome_rejected(self, metrics):
        with pytest.raises(ValueError):
            metrics.record_submission("exploded")

    def test_insert_latency(self, metrics):
        metrics.record_insert_latency(0.02)
        assert metrics.registry.get_sample_value("feedback_insert_latency_seconds_count") == 1.0

    def test_rate_limit_keys_gauge(self, metrics):
        metrics.set_rate_limit_keys(7)
        assert metrics.registry.get_sample_value("feedback_rate_limit_keys") == 7.0

    def test_separate_registries_do_not_collide(self):
        MetricsCollector(registry=CollectorRegistry())
        MetricsCollector(registry=CollectorRegistry())

    def test_global_instance(self):
        assert get_metrics() is get_metrics()
