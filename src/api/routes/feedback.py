"""Feedback submission endpoint.

Each POST runs the intake pipeline in a fixed order:
rate limit, validate, persist. The rate-limit slot is taken before
validation, so invalid submissions count against the client's budget.
Failures are raised as exceptions and turned into responses by the
handlers registered in ``src.api.app``.
"""

import json
import math
import time

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from src.api.dependencies import (
    get_feedback_repository,
    get_rate_limit_config,
    get_rate_limiter,
)
from src.api.models import (
    ErrorResponse,
    FeedbackCreatedResponse,
    FeedbackData,
    FeedbackRequest,
    ValidationFailedResponse,
)
from src.api.rate_limit import get_client_key
from src.feedback.repository import FeedbackRepository, StoreWriteError
from src.feedback.validator import FeedbackValidationError, validate
from src.observability.metrics import get_metrics
from src.ratelimit.config import RateLimitConfig
from src.ratelimit.limiter import FixedWindowRateLimiter, RateLimitExceeded

logger = structlog.get_logger(__name__)
router = APIRouter()

INVALID_JSON_ERROR = "Request body must be a valid JSON object."


async def _read_payload(request: Request):
    """Decode the JSON body, mapping malformed input to a validation error."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise FeedbackValidationError([INVALID_JSON_ERROR])


@router.post(
    "/api/feedback",
    response_model=FeedbackCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ValidationFailedResponse, "description": "Invalid submission"},
        405: {"model": ErrorResponse, "description": "Method not allowed"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Submit feedback",
    description=(
        "Validate and store a feedback submission. Each client may submit "
        "a limited number of times per window, counting rejected submissions."
    ),
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": FeedbackRequest.model_json_schema()}},
            "required": True,
        }
    },
)
async def create_feedback(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
    rate_limit_config: RateLimitConfig = Depends(get_rate_limit_config),
    feedback_repo: FeedbackRepository = Depends(get_feedback_repository),
) -> FeedbackCreatedResponse:
    metrics = get_metrics()

    client_key = get_client_key(request, rate_limit_config.trust_forwarded_for)
    allowed = limiter.allow(client_key)
    metrics.set_rate_limit_keys(len(limiter))
    if not allowed:
        metrics.record_submission("rate_limited")
        logger.warning("Feedback rate limited", client_key=client_key)
        raise RateLimitExceeded(
            client_key,
            retry_after=math.ceil(limiter.retry_after(client_key)),
        )

    try:
        payload = await _read_payload(request)
        submission = validate(payload).raise_for_errors()
    except FeedbackValidationError as e:
        metrics.record_submission("validation_failed")
        logger.info("Feedback rejected", client_key=client_key, errors=e.errors)
        raise

    start_time = time.perf_counter()
    try:
        record = await feedback_repo.insert(submission)
    except StoreWriteError:
        metrics.record_submission("store_error")
        raise
    latency = time.perf_counter() - start_time

    metrics.record_submission("created")
    metrics.record_insert_latency(latency)
    logger.info(
        "Feedback created",
        feedback_id=record.id,
        rating=record.rating,
        latency_ms=round(latency * 1000, 2),
    )

    return FeedbackCreatedResponse(
        data=FeedbackData(
            id=record.id,
            submitted_at=record.created_at.isoformat(),
        ),
    )


@router.options("/api/feedback", include_in_schema=False)
async def feedback_options() -> Response:
    """Answer bare OPTIONS requests; CORS preflights are handled by middleware."""
    return Response(status_code=status.HTTP_200_OK)
