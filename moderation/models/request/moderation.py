"""Request models for moderation endpoints."""

from pydantic import BaseModel, Field


class SpamCheckRequest(BaseModel):
    """Spam check request model.

    Attributes:
        content: Text to check
    """

    content: str = Field(
        ...,
        description="Text to check for spam; may be empty",
        examples=["Looking for a senior backend engineer role in Lagos"],
    )
