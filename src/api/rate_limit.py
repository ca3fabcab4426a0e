"""
API rate limiting glue.

Derives the rate-limit key for a request and runs the background
sweep that keeps the limiter's memory bounded.
"""

import asyncio
import logging

from slowapi.util import get_remote_address
from starlette.requests import Request

from src.observability.metrics import get_metrics
from src.ratelimit.limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


def get_client_key(request: Request, trust_forwarded_for: bool = True) -> str:
    """Extract rate limit key: first X-Forwarded-For hop or remote IP."""
    if trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


async def run_sweeper(limiter: FixedWindowRateLimiter, interval_seconds: float) -> None:
    """Periodically drop expired limiter entries until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = limiter.sweep()
        get_metrics().set_rate_limit_keys(len(limiter))
        if removed:
            logger.info("Rate limiter sweep removed %d entries", removed)
