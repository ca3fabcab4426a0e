"""
Health check endpoint with a database probe.
"""

import time

import structlog
from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_database, get_rate_limiter
from src.api.models import ComponentHealth, HealthResponse
from src.ratelimit.limiter import FixedWindowRateLimiter
from src.storage.database import Database

router = APIRouter()
logger = structlog.get_logger(__name__)

SERVICE_VERSION = "0.1.0"


async def _check_database(db: Database) -> ComponentHealth:
    """Check database connectivity and measure latency."""
    start = time.perf_counter()
    try:
        healthy = await db.health_check()
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="healthy" if healthy else "unhealthy",
            latency_ms=round(latency_ms, 2),
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round(latency_ms, 2),
            details={"error": str(e)},
        )


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
    summary="Service health check",
    description="Check the health of the service and its database.",
)
async def health_check(
    response: Response,
    db: Database = Depends(get_database),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> HealthResponse:
    """
    Report service health.

    Status logic:
    - unhealthy (503): database is down
    - healthy: database answers SELECT 1
    """
    db_health = await _check_database(db)

    if db_health.status == "unhealthy":
        logger.warning("Health check failed", component="database", details=db_health.details)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=db_health.status,
        components={"database": db_health},
        rate_limit_keys=len(limiter),
        version=SERVICE_VERSION,
    )
