"""Shared fixtures for feedback tests."""

from unittest.mock import AsyncMock

import pytest

from src.feedback.schemas import NormalizedSubmission


@pytest.fixture
def mock_database():
    """Mock Database with async query methods."""
    db = AsyncMock()
    db.execute = AsyncMock(return_value="CREATE TABLE")
    db.fetchrow = AsyncMock()
    db.fetchval = AsyncMock()
    return db


@pytest.fixture
def valid_payload():
    """A raw submission body that satisfies every rule."""
    return {
        "fullName": "  Jane Doe ",
        "email": " JANE@Example.com ",
        "rating": 5,
        "message": "  Great service, will return!  ",
    }


@pytest.fixture
def sample_submission():
    """A normalized submission ready to insert."""
    return NormalizedSubmission(
        full_name="Jane Doe",
        email="jane@example.com",
        rating=5,
        message="Great service, will return!",
    )
