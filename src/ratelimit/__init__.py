"""Per-client submission rate limiting.

Components:
- FixedWindowRateLimiter: In-process fixed-window counter
- RateLimitEntry: Counter state for one client key
- RateLimitExceeded: Raised by the API layer when a request is denied
- RateLimitConfig: Pydantic settings for window size and budget
"""

from src.ratelimit.config import RateLimitConfig
from src.ratelimit.limiter import (
    FixedWindowRateLimiter,
    RateLimitEntry,
    RateLimitExceeded,
)

__all__ = [
    "FixedWindowRateLimiter",
    "RateLimitConfig",
    "RateLimitEntry",
    "RateLimitExceeded",
]
