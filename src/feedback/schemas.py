"""Schema definitions for feedback submissions and records.

``FeedbackRecord`` maps 1:1 to the ``feedback`` database table.
``NormalizedSubmission`` is a validated submission ready to insert.
The field rules here are shared by the validator and by the table's
check constraints.
"""

import re
from dataclasses import dataclass
from datetime import datetime

EMAIL_PATTERN = r"^[A-Za-z0-9._%-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,4}$"
EMAIL_REGEX = re.compile(EMAIL_PATTERN)

MIN_RATING = 1
MAX_RATING = 5
MIN_MESSAGE_LENGTH = 10
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255


@dataclass(frozen=True)
class NormalizedSubmission:
    """A validated submission with trimmed strings and a lower-cased email."""

    full_name: str
    email: str
    rating: int
    message: str


@dataclass(frozen=True)
class FeedbackRecord:
    """A persisted feedback record from the feedback table.

    Attributes:
        id: Store-assigned serial identifier.
        full_name: Submitter's name, trimmed.
        email: Submitter's email, trimmed and lower-cased.
        rating: Score from 1 (poor) to 5 (excellent).
        message: Free-text feedback, at least 10 characters.
        created_at: Insert time assigned by the store.
    """

    id: int
    full_name: str
    email: str
    rating: int
    message: str
    created_at: datetime
