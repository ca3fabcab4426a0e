"""
FastAPI application factory.
"""

import asyncio
import contextlib
import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.dependencies import (
    cleanup_dependencies,
    get_rate_limit_config,
    get_rate_limiter,
    init_dependencies,
)
from src.api.middleware.cors import PreflightCORSMiddleware
from src.api.models import ErrorResponse, ServiceInfo, ValidationFailedResponse
from src.api.rate_limit import run_sweeper
from src.api.routes import feedback, health
from src.api.routes.health import SERVICE_VERSION
from src.config.settings import get_settings
from src.feedback.repository import StoreWriteError
from src.feedback.validator import FeedbackValidationError
from src.observability.logging import bind_context, clear_context
from src.ratelimit.limiter import RateLimitExceeded

logger = structlog.get_logger(__name__)

SERVICE_NAME = "Feedback Intake API"
RATE_LIMIT_MESSAGE = "Too many requests, try again after 15 minutes."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Startup fails (and the server never accepts traffic) if the
    database is unreachable or the feedback table cannot be created.
    """
    logger.info("Feedback API starting up")

    await init_dependencies()

    sweeper: asyncio.Task | None = None
    config = get_rate_limit_config()
    if config.sweep_interval_seconds > 0:
        sweeper = asyncio.create_task(
            run_sweeper(get_rate_limiter(), config.sweep_interval_seconds)
        )

    yield

    logger.info("Feedback API shutting down")
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    await cleanup_dependencies()


def _error(status_code: int, error: str, message: str | None = None, headers=None) -> JSONResponse:
    body = ErrorResponse(status=status_code, error=error, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=SERVICE_NAME,
        description="""
API for collecting user feedback from the web form.

Submissions are rate limited per client, validated, and stored in PostgreSQL.
        """,
        version=SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "feedback", "description": "Feedback submission"},
            {"name": "health", "description": "Service health checks"},
        ],
    )

    # All origins by default (CORS_ORIGINS env var, comma-separated)
    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        bind_context(request_id=request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    @app.exception_handler(FeedbackValidationError)
    async def validation_exception_handler(request: Request, exc: FeedbackValidationError):
        body = ValidationFailedResponse(errors=exc.errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
        headers = None
        if exc.retry_after is not None:
            headers = {"Retry-After": str(int(exc.retry_after))}
        return _error(status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMIT_MESSAGE, headers=headers)

    @app.exception_handler(StoreWriteError)
    async def store_write_exception_handler(request: Request, exc: StoreWriteError):
        logger.error("Feedback store write failed", error=str(exc), exc_info=exc)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "Failed to save feedback.",
        )

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return _error(exc.status_code, "Method Not Allowed", headers=exc.headers)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")

    app.include_router(feedback.router, tags=["feedback"])
    app.include_router(health.router, tags=["health"])

    @app.get("/", response_model=ServiceInfo, include_in_schema=False)
    async def root() -> ServiceInfo:
        return ServiceInfo(
            message="Feedback API is running!",
            service=SERVICE_NAME,
            version=SERVICE_VERSION,
        )

    return app
