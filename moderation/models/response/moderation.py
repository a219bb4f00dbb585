"""Response models for moderation endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class SpamCheckResponse(BaseModel):
    """Spam check response model.

    Attributes:
        is_spam: Verdict for the submitted content
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"isSpam": False}]},
    )

    is_spam: bool = Field(
        ...,
        alias="isSpam",
        description="True if the content was judged to be spam",
    )
