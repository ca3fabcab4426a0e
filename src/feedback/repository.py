"""Feedback repository: schema ownership and persistence.

Uses asyncpg through the shared ``Database`` pool. The table's check
constraints mirror the validator's rules so a caller that skips
validation still cannot store an invalid record.
"""

import logging
from typing import Any

import asyncpg

from src.feedback.schemas import (
    EMAIL_PATTERN,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_RATING,
    MIN_MESSAGE_LENGTH,
    MIN_RATING,
    FeedbackRecord,
    NormalizedSubmission,
)
from src.storage.database import Database, StoreUnavailable

logger = logging.getLogger(__name__)

# Errors from the driver that mean the write did not happen
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS feedback (
        id SERIAL PRIMARY KEY,
        full_name VARCHAR({MAX_NAME_LENGTH}) NOT NULL
            CONSTRAINT feedback_full_name_present CHECK (LENGTH(TRIM(full_name)) > 0),
        email VARCHAR({MAX_EMAIL_LENGTH}) NOT NULL
            CONSTRAINT feedback_email_format CHECK (email ~* '{EMAIL_PATTERN}'),
        rating INTEGER NOT NULL
            CONSTRAINT feedback_rating_range CHECK (rating >= {MIN_RATING} AND rating <= {MAX_RATING}),
        message TEXT NOT NULL
            CONSTRAINT feedback_message_length CHECK (LENGTH(message) >= {MIN_MESSAGE_LENGTH}),
        created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
"""


class StoreWriteError(Exception):
    """Raised when a feedback record could not be persisted."""


class FeedbackRepository:
    """Repository for feedback persistence.

    Records are create-only: there is no update or delete path.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def ensure_schema(self) -> None:
        """Create the feedback table if it does not exist.

        Safe to call on every startup.

        Raises:
            StoreUnavailable: If the DDL cannot be executed.
        """
        try:
            await self._db.execute(CREATE_TABLE_SQL)
        except _DRIVER_ERRORS as e:
            logger.error(f"Failed to ensure feedback table: {e}")
            raise StoreUnavailable(f"Cannot create feedback table: {e}") from e
        logger.info("Feedback table ready")

    async def insert(self, submission: NormalizedSubmission) -> FeedbackRecord:
        """Insert a normalized submission.

        Args:
            submission: Validated, normalized submission.

        Returns:
            The stored record with the DB-assigned id and created_at.

        Raises:
            StoreWriteError: On constraint violations or connectivity
                loss. Never retried here.
        """
        sql = """
            INSERT INTO feedback (full_name, email, rating, message)
            VALUES ($1, $2, $3, $4)
            RETURNING id, created_at
        """
        try:
            row = await self._db.fetchrow(
                sql,
                submission.full_name,
                submission.email,
                submission.rating,
                submission.message,
            )
        except _DRIVER_ERRORS as e:
            raise StoreWriteError(f"Failed to insert feedback: {e}") from e

        if row is None:
            raise StoreWriteError("Insert returned no row")

        return FeedbackRecord(
            id=row["id"],
            full_name=submission.full_name,
            email=submission.email,
            rating=submission.rating,
            message=submission.message,
            created_at=row["created_at"],
        )

    async def get_by_id(self, feedback_id: int) -> FeedbackRecord | None:
        """Fetch a single record by id, or None if absent."""
        sql = """
            SELECT id, full_name, email, rating, message, created_at
            FROM feedback
            WHERE id = $1
        """
        row = await self._db.fetchrow(sql, feedback_id)
        if row is None:
            return None
        return _row_to_record(row)


def _row_to_record(row: Any) -> FeedbackRecord:
    """Convert an asyncpg Record to a FeedbackRecord."""
    return FeedbackRecord(
        id=row["id"],
        full_name=row["full_name"],
        email=row["email"],
        rating=row["rating"],
        message=row["message"],
        created_at=row["created_at"],
    )
