"""Feedback intake: validation, schemas, and persistence.

Components:
- validate / ValidationResult: Field rules and normalization
- NormalizedSubmission / FeedbackRecord: Dataclasses for input and stored rows
- FeedbackRepository: Schema creation and inserts against the feedback table
- StoreWriteError / FeedbackValidationError: Errors surfaced to the API layer
"""

from src.feedback.repository import FeedbackRepository, StoreWriteError
from src.feedback.schemas import FeedbackRecord, NormalizedSubmission
from src.feedback.validator import (
    FeedbackValidationError,
    ValidationResult,
    validate,
)

__all__ = [
    "FeedbackRecord",
    "FeedbackRepository",
    "FeedbackValidationError",
    "NormalizedSubmission",
    "StoreWriteError",
    "ValidationResult",
    "validate",
]
