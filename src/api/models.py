"""
Request and response models for the feedback API.

Response bodies keep the camelCase keys the web form expects
(``submittedAt``) via serialization aliases.
"""

from pydantic import BaseModel, Field


class FeedbackRequest(BaseModel):
    """Documented shape of a submission body.

    Only used for the OpenAPI schema: the route validates the raw
    JSON itself so that every rule violation is reported together.
    """

    fullName: str = Field(..., description="Submitter's full name")
    email: str = Field(..., description="Submitter's email address")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    message: str = Field(..., min_length=10, description="Feedback text (at least 10 chars)")


class FeedbackData(BaseModel):
    """Identifier and timestamp of a stored submission."""

    id: int = Field(..., description="Store-assigned feedback identifier")
    submitted_at: str = Field(
        ...,
        serialization_alias="submittedAt",
        description="Insert timestamp (ISO format)",
    )


class FeedbackCreatedResponse(BaseModel):
    """Response model for an accepted submission."""

    status: int = Field(default=201, description="HTTP status code")
    message: str = Field(default="Feedback received!", description="Confirmation message")
    data: FeedbackData = Field(..., description="Stored record reference")


class ValidationFailedResponse(BaseModel):
    """Response model for a rejected submission."""

    status: int = Field(default=400, description="HTTP status code")
    title: str = Field(default="Validation Failed", description="Error title")
    errors: list[str] = Field(..., description="One message per violated rule")


class ErrorResponse(BaseModel):
    """Generic error response."""

    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="Error summary")
    message: str | None = Field(default=None, description="Additional detail safe to show")


class ComponentHealth(BaseModel):
    """Health status of an individual infrastructure component."""

    status: str = Field(..., description="Component status: healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency in milliseconds")
    details: dict | None = Field(default=None, description="Additional details")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Overall service status: healthy or unhealthy")
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-component health details",
    )
    rate_limit_keys: int = Field(default=0, description="Client keys tracked by the rate limiter")
    version: str = Field(..., description="Service version")


class ServiceInfo(BaseModel):
    """Response model for the root endpoint."""

    message: str = Field(..., description="Liveness message")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    docs: str = Field(default="/docs", description="OpenAPI docs path")
