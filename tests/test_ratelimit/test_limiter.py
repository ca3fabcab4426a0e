"""Tests for the fixed-window rate limiter."""

import threading

import pytest

from src.ratelimit.config import RateLimitConfig
from src.ratelimit.limiter import FixedWindowRateLimiter

WINDOW = 15 * 60


@pytest.fixture
def limiter():
    return FixedWindowRateLimiter(window_seconds=WINDOW, max_requests=10)


class TestAllow:
    """Tests for FixedWindowRateLimiter.allow()."""

    def test_ten_allowed_then_denied(self, limiter):
        results = [limiter.allow("1.2.3.4", now=100.0 + i) for i in range(11)]
        assert results == [True] * 10 + [False]

    def test_stays_denied_within_window(self, limiter):
        for _ in range(10):
            limiter.allow("k", now=0.0)
        assert limiter.allow("k", now=WINDOW - 1) is False
        assert limiter.allow("k", now=WINDOW) is False

    def test_resets_after_window(self, limiter):
        for _ in range(10):
            limiter.allow("k", now=0.0)
        assert limiter.allow("k", now=0.0) is False

        assert limiter.allow("k", now=16 * 60) is True
        entry = limiter.get_entry("k")
        assert entry.count == 1
        assert entry.window_reset_at == 16 * 60 + WINDOW

    def test_reset_boundary_is_exclusive(self, limiter):
        limiter.allow("k", now=0.0)
        for _ in range(9):
            limiter.allow("k", now=1.0)
        # now == window_reset_at is still inside the window
        assert limiter.allow("k", now=WINDOW) is False
        assert limiter.allow("k", now=WINDOW + 0.001) is True

    def test_keys_are_independent(self, limiter):
        for _ in range(10):
            limiter.allow("a", now=0.0)
        assert limiter.allow("a", now=1.0) is False
        assert limiter.allow("b", now=1.0) is True
        assert limiter.get_entry("b").count == 1

    def test_window_does_not_slide(self, limiter):
        # Budget spent at the end of one window and again at the start of
        # the next: 19 admitted within two seconds.
        limiter.allow("k", now=0.0)
        late = sum(limiter.allow("k", now=WINDOW - 1) for _ in range(9))
        early = sum(limiter.allow("k", now=WINDOW + 1) for _ in range(10))
        assert late + early == 19

    def test_first_request_opens_window(self, limiter):
        limiter.allow("k", now=50.0)
        entry = limiter.get_entry("k")
        assert entry.client_key == "k"
        assert entry.count == 1
        assert entry.window_reset_at == 50.0 + WINDOW

    def test_uses_clock_when_now_omitted(self):
        now = [0.0]
        limiter = FixedWindowRateLimiter(window_seconds=10, max_requests=1, clock=lambda: now[0])
        assert limiter.allow("k") is True
        assert limiter.allow("k") is False
        now[0] = 11.0
        assert limiter.allow("k") is True

    def test_concurrent_requests_never_exceed_limit(self):
        limiter = FixedWindowRateLimiter(window_seconds=WINDOW, max_requests=10)
        results: list[bool] = []
        lock = threading.Lock()

        def hit():
            allowed = limiter.allow("shared", now=0.0)
            with lock:
                results.append(allowed)

        threads = [threading.Thread(target=hit) for _ in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 10
        assert limiter.get_entry("shared").count == 10

    @pytest.mark.parametrize("kwargs", [
        {"window_seconds": 0},
        {"window_seconds": -1},
        {"max_requests": 0},
    ])
    def test_rejects_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(**kwargs)


class TestMaintenance:
    """Tests for sweep(), reset(), retry_after() and len()."""

    def test_sweep_drops_only_expired(self, limiter):
        limiter.allow("old", now=0.0)
        limiter.allow("fresh", now=WINDOW)

        removed = limiter.sweep(now=WINDOW + 1)

        assert removed == 1
        assert limiter.get_entry("old") is None
        assert limiter.get_entry("fresh") is not None
        assert len(limiter) == 1

    def test_sweep_empty(self, limiter):
        assert limiter.sweep(now=0.0) == 0

    def test_swept_key_starts_fresh(self, limiter):
        for _ in range(10):
            limiter.allow("k", now=0.0)
        limiter.sweep(now=WINDOW + 1)
        assert limiter.allow("k", now=WINDOW + 2) is True

    def test_reset_clears_everything(self, limiter):
        limiter.allow("a", now=0.0)
        limiter.allow("b", now=0.0)
        limiter.reset()
        assert len(limiter) == 0

    def test_retry_after(self, limiter):
        limiter.allow("k", now=100.0)
        assert limiter.retry_after("k", now=400.0) == WINDOW - 300
        assert limiter.retry_after("k", now=100.0 + WINDOW + 5) == 0.0
        assert limiter.retry_after("unknown", now=0.0) == 0.0

    def test_get_entry_returns_copy(self, limiter):
        limiter.allow("k", now=0.0)
        entry = limiter.get_entry("k")
        entry.count = 99
        assert limiter.get_entry("k").count == 1


class TestRateLimitConfig:
    """Tests for RateLimitConfig defaults and env overrides."""

    def test_defaults(self):
        config = RateLimitConfig()
        assert config.window_seconds == 900
        assert config.max_requests == 10
        assert config.sweep_interval_seconds == 300
        assert config.trust_forwarded_for is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "3")
        monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")
        config = RateLimitConfig()
        assert config.max_requests == 3
        assert config.window_seconds == 60

    def test_rejects_zero_budget(self):
        with pytest.raises(ValueError):
            RateLimitConfig(max_requests=0)
