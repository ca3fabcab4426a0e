"""Tests for rate limit key extraction and the background sweeper."""

import asyncio

import pytest
from starlette.requests import Request

from src.api.rate_limit import get_client_key, run_sweeper
from src.ratelimit.limiter import FixedWindowRateLimiter


def _request(headers: list[tuple[bytes, bytes]], client=("192.168.1.100", 12345)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/feedback",
        "headers": headers,
        "client": client,
    }
    return Request(scope)


class TestClientKeyExtraction:
    """Tests for get_client_key()."""

    def test_uses_first_forwarded_hop(self):
        request = _request([(b"x-forwarded-for", b"203.0.113.9, 10.0.0.2, 10.0.0.3")])
        assert get_client_key(request) == "203.0.113.9"

    def test_single_forwarded_address(self):
        request = _request([(b"x-forwarded-for", b"203.0.113.9")])
        assert get_client_key(request) == "203.0.113.9"

    def test_falls_back_to_peer_ip(self):
        assert get_client_key(_request([])) == "192.168.1.100"

    def test_blank_forwarded_header_falls_back(self):
        request = _request([(b"x-forwarded-for", b" , 10.0.0.2")])
        assert get_client_key(request) == "192.168.1.100"

    def test_forwarded_ignored_when_untrusted(self):
        request = _request([(b"x-forwarded-for", b"203.0.113.9")])
        assert get_client_key(request, trust_forwarded_for=False) == "192.168.1.100"


class TestSweeper:
    """Tests for run_sweeper()."""

    @pytest.mark.asyncio
    async def test_sweeps_expired_entries_until_cancelled(self):
        now = [0.0]
        limiter = FixedWindowRateLimiter(window_seconds=10, max_requests=5, clock=lambda: now[0])
        limiter.allow("old")
        now[0] = 20.0
        limiter.allow("fresh")

        task = asyncio.create_task(run_sweeper(limiter, interval_seconds=0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert limiter.get_entry("old") is None
        assert limiter.get_entry("fresh") is not None
