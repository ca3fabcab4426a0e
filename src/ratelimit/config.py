"""Rate limiter configuration.

Controls the fixed window applied to feedback submissions. All
settings can be overridden via ``RATE_LIMIT_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitConfig(BaseSettings):
    """Configuration for the per-client submission limiter."""

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
        extra="ignore",
    )

    window_seconds: float = Field(
        default=15 * 60,
        gt=0,
        description="Length of one fixed window",
    )
    max_requests: int = Field(
        default=10,
        ge=1,
        description="Requests admitted per client per window",
    )
    sweep_interval_seconds: float = Field(
        default=300,
        ge=0,
        description="How often expired entries are dropped (0 disables)",
    )
    trust_forwarded_for: bool = Field(
        default=True,
        description="Key clients by the first X-Forwarded-For hop when present",
    )
