"""Spam classification for submitted content."""

from moderation.services.classification.schemas import (
    ClassificationRequest,
    ClassificationResult,
    SpamVerdict,
)
from moderation.services.classification.spam_classifier import SpamClassifier

__all__ = [
    "ClassificationRequest",
    "ClassificationResult",
    "SpamVerdict",
    "SpamClassifier",
]
