"""Shared fixtures for API tests."""

import itertools
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_database, get_feedback_repository, get_rate_limiter
from src.feedback.repository import FeedbackRepository
from src.feedback.schemas import FeedbackRecord, NormalizedSubmission
from src.ratelimit.limiter import FixedWindowRateLimiter

BASE_TIME = datetime(2026, 2, 5, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_feedback_repo():
    """Mock FeedbackRepository that assigns increasing ids and timestamps."""
    repo = AsyncMock(spec=FeedbackRepository)
    ids = itertools.count(1)

    async def _insert(submission: NormalizedSubmission) -> FeedbackRecord:
        record_id = next(ids)
        return FeedbackRecord(
            id=record_id,
            full_name=submission.full_name,
            email=submission.email,
            rating=submission.rating,
            message=submission.message,
            created_at=BASE_TIME + timedelta(seconds=record_id),
        )

    repo.insert = AsyncMock(side_effect=_insert)
    repo.ensure_schema = AsyncMock()
    return repo


@pytest.fixture
def mock_db():
    """Mock Database reporting healthy."""
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def rate_limiter():
    """Fresh limiter per test with the production window and budget."""
    return FixedWindowRateLimiter(window_seconds=15 * 60, max_requests=10)


@pytest.fixture
def app(mock_feedback_repo, mock_db, rate_limiter):
    """App with collaborators overridden; lifespan is not run."""
    app = create_app()
    app.dependency_overrides[get_feedback_repository] = lambda: mock_feedback_repo
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_database] = lambda: mock_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """TestClient that returns 500 responses instead of raising."""
    return TestClient(app, raise_server_exceptions=False)
