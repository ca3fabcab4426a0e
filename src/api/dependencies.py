"""
Dependency injection for FastAPI endpoints.
"""

from src.feedback.repository import FeedbackRepository
from src.ratelimit.config import RateLimitConfig
from src.ratelimit.limiter import FixedWindowRateLimiter
from src.storage.database import Database

# Global service instances (initialized at startup or on first request)
_database: Database | None = None
_feedback_repository: FeedbackRepository | None = None
_rate_limit_config: RateLimitConfig | None = None
_rate_limiter: FixedWindowRateLimiter | None = None


async def get_database() -> Database:
    """
    Get database instance.

    Creates and connects the pool on first use.

    Raises:
        StoreUnavailable: If the database cannot be reached.
    """
    global _database

    if _database is None:
        database = Database()
        await database.connect()
        _database = database

    return _database


async def get_feedback_repository() -> FeedbackRepository:
    """Get the feedback repository bound to the shared database pool."""
    global _feedback_repository

    if _feedback_repository is None:
        _feedback_repository = FeedbackRepository(await get_database())

    return _feedback_repository


def get_rate_limit_config() -> RateLimitConfig:
    """Get rate limiter settings (loaded from RATE_LIMIT_* env vars once)."""
    global _rate_limit_config

    if _rate_limit_config is None:
        _rate_limit_config = RateLimitConfig()

    return _rate_limit_config


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Get the process-wide submission rate limiter."""
    global _rate_limiter

    if _rate_limiter is None:
        config = get_rate_limit_config()
        _rate_limiter = FixedWindowRateLimiter(
            window_seconds=config.window_seconds,
            max_requests=config.max_requests,
        )

    return _rate_limiter


async def init_dependencies() -> None:
    """
    Connect to the database and ensure the feedback table exists.

    Called from the app lifespan so a missing store stops the
    process before it serves traffic.

    Raises:
        StoreUnavailable: If the database is unreachable or the
            schema cannot be created.
    """
    repo = await get_feedback_repository()
    await repo.ensure_schema()
    get_rate_limiter()


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _feedback_repository, _rate_limiter, _rate_limit_config

    _feedback_repository = None
    _rate_limiter = None
    _rate_limit_config = None

    if _database is not None:
        await _database.close()
        _database = None
