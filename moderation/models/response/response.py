from typing import Optional

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Service status
        version: Application version
        service: Service name
    """

    status: str = Field(
        default="healthy",
        description="Service health status",
        examples=["healthy", "unhealthy"],
    )
    version: str = Field(
        ...,
        description="Application version",
        examples=["0.1.0"],
    )
    service: str = Field(
        ...,
        description="Service name",
        examples=["Job Board Moderation Service"],
    )


class LLMHealthResponse(BaseModel):
    """Result of a provider connectivity check."""

    status: str = Field(..., examples=["healthy", "unhealthy"])
    provider: str = Field(..., examples=["openai"])
    model: str = Field(..., examples=["gpt-4o-mini"])
    error: Optional[str] = Field(default=None, description="Failure reason when unhealthy")


class ErrorResponse(BaseModel):
    """Error payload returned inside ``detail`` for failed requests."""

    error: str = Field(..., description="Error kind", examples=["ProviderUnavailableError"])
    message: str = Field(..., description="Human readable summary")
    detail: Optional[str] = Field(default=None, description="Underlying error message")
