"""Fixed-window rate limiter keyed by client address.

Each client key gets a counter and a reset deadline. The first request
opens a window of ``window_seconds``; up to ``max_requests`` requests
are admitted until the deadline passes, after which the next request
opens a fresh window.

The window is fixed, not sliding: a client can spend its budget just
before a reset and again just after, so up to ``2 * max_requests``
requests may be admitted across a boundary.

State lives in process memory. Each process enforces its own limit and
nothing survives a restart.

Usage:
    limiter = FixedWindowRateLimiter(window_seconds=900, max_requests=10)
    if not limiter.allow(client_key):
        raise RateLimitExceeded(client_key)
"""

import logging
import threading
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a client has used its budget for the current window."""

    def __init__(self, client_key: str, retry_after: float | None = None) -> None:
        super().__init__(f"Rate limit exceeded for {client_key}")
        self.client_key = client_key
        self.retry_after = retry_after


@dataclass
class RateLimitEntry:
    """Counter state for one client key."""

    client_key: str
    count: int
    window_reset_at: float


class FixedWindowRateLimiter:
    """In-process fixed-window request counter.

    ``allow`` performs its read-check-increment under a lock so
    concurrent requests from one client can never push the count past
    ``max_requests``.

    Args:
        window_seconds: Window length in seconds.
        max_requests: Requests admitted per key per window.
        clock: Monotonic time source used when ``now`` is not passed.
    """

    def __init__(
        self,
        window_seconds: float = 15 * 60,
        max_requests: int = 10,
        clock=time.monotonic,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self._window_seconds = window_seconds
        self._max_requests = max_requests
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def max_requests(self) -> int:
        return self._max_requests

    def __len__(self) -> int:
        return len(self._entries)

    def allow(self, client_key: str, now: float | None = None) -> bool:
        """Record a request for ``client_key`` and report whether it is admitted.

        Args:
            client_key: Identifier of the requester (usually its IP).
            now: Current monotonic time; defaults to the limiter's clock.

        Returns:
            True if the request fits in the client's current window.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            entry = self._entries.get(client_key)

            if entry is None or now > entry.window_reset_at:
                self._entries[client_key] = RateLimitEntry(
                    client_key=client_key,
                    count=1,
                    window_reset_at=now + self._window_seconds,
                )
                return True

            if entry.count < self._max_requests:
                entry.count += 1
                return True

        logger.debug("Rate limit exceeded for %s", client_key)
        return False

    def retry_after(self, client_key: str, now: float | None = None) -> float:
        """Seconds until ``client_key``'s window resets (0 if untracked)."""
        if now is None:
            now = self._clock()
        with self._lock:
            entry = self._entries.get(client_key)
            if entry is None:
                return 0.0
            return max(0.0, entry.window_reset_at - now)

    def get_entry(self, client_key: str) -> RateLimitEntry | None:
        """Return a copy of the entry for ``client_key``, if tracked."""
        with self._lock:
            entry = self._entries.get(client_key)
            if entry is None:
                return None
            return RateLimitEntry(entry.client_key, entry.count, entry.window_reset_at)

    def sweep(self, now: float | None = None) -> int:
        """Drop entries whose window has expired.

        Returns:
            Number of entries removed.
        """
        if now is None:
            now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items()
                if now > entry.window_reset_at
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired rate limit entries", len(expired))
        return len(expired)

    def reset(self) -> None:
        """Forget every tracked client."""
        with self._lock:
            self._entries.clear()
