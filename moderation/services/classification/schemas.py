"""Data contracts for spam classification."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class ClassificationRequest:
    """Text submitted for a spam check."""
    content: str


class SpamVerdict(BaseModel):
    """Output schema the provider must conform to.

    Strict so that ``"true"``, ``1`` or ``"yes"`` are rejected rather than
    coerced; unknown fields are ignored.
    """

    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    is_spam: bool = Field(
        ...,
        alias="isSpam",
        description="True if the content is spam",
    )


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of a successful spam check."""
    is_spam: bool
