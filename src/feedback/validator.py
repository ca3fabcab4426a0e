"""Validation and normalization of raw feedback submissions.

``validate`` checks every rule without short-circuiting so the caller
can report all problems at once. Errors are always ordered
fullName, email, rating, message.
"""

from dataclasses import dataclass, field
from typing import Any

from src.feedback.schemas import (
    EMAIL_REGEX,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_RATING,
    MIN_MESSAGE_LENGTH,
    MIN_RATING,
    NormalizedSubmission,
)

FULL_NAME_ERROR = "Full Name is required."
EMAIL_ERROR = "A valid Email is required."
RATING_ERROR = "Rating must be 1-5."
MESSAGE_ERROR = "Message must be at least 10 chars."


class FeedbackValidationError(Exception):
    """Raised when a submission violates one or more field rules."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


@dataclass
class ValidationResult:
    """Outcome of validating one submission.

    Exactly one of ``submission`` and ``errors`` is meaningful:
    a valid result carries the normalized submission and no errors.
    """

    submission: NormalizedSubmission | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.submission is not None

    def raise_for_errors(self) -> NormalizedSubmission:
        """Return the normalized submission or raise FeedbackValidationError."""
        if not self.is_valid:
            raise FeedbackValidationError(self.errors)
        return self.submission


def _is_rating(value: Any) -> bool:
    # bool is an int subclass; JSON true must not pass as a rating of 1
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_RATING <= value <= MAX_RATING


def validate(payload: Any) -> ValidationResult:
    """Validate a decoded JSON submission.

    Args:
        payload: The request body, expected to be a dict with
            ``fullName``, ``email``, ``rating`` and ``message`` keys.
            Anything else fails every rule.

    Returns:
        ValidationResult holding either the normalized submission
        (trimmed strings, lower-cased email) or the error list.
    """
    if not isinstance(payload, dict):
        payload = {}

    full_name = payload.get("fullName")
    email = payload.get("email")
    rating = payload.get("rating")
    message = payload.get("message")

    full_name = full_name.strip() if isinstance(full_name, str) else ""
    email = email.strip() if isinstance(email, str) else ""
    message = message.strip() if isinstance(message, str) else ""

    errors: list[str] = []
    if not full_name or len(full_name) > MAX_NAME_LENGTH:
        errors.append(FULL_NAME_ERROR)
    if len(email) > MAX_EMAIL_LENGTH or not EMAIL_REGEX.fullmatch(email):
        errors.append(EMAIL_ERROR)
    if not _is_rating(rating):
        errors.append(RATING_ERROR)
    if len(message) < MIN_MESSAGE_LENGTH:
        errors.append(MESSAGE_ERROR)

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        submission=NormalizedSubmission(
            full_name=full_name,
            email=email.lower(),
            rating=rating,
            message=message,
        )
    )
