"""Content moderation API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from moderation.core.exceptions import (
    ContentTooLongError,
    InvalidContentError,
    ProviderRefusedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    SchemaValidationFailedError,
)
from moderation.dependencies import get_spam_classifier
from moderation.models.request.moderation import SpamCheckRequest
from moderation.models.response.moderation import SpamCheckResponse
from moderation.models.response.response import ErrorResponse
from moderation.services.classification.spam_classifier import SpamClassifier
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()

# Checked in order, so subclasses come before their parents
ERROR_STATUS = [
    (ContentTooLongError, 413, "Content is too long"),
    (InvalidContentError, 400, "Content cannot be classified"),
    (ProviderRefusedError, 424, "Provider refused to classify the content"),
    (SchemaValidationFailedError, 502, "Provider returned an invalid verdict"),
    (ProviderTimeoutError, 504, "Provider did not answer in time"),
    (ProviderUnavailableError, 503, "Provider is unavailable"),
]


@router.post(
    "/spam-check",
    response_model=SpamCheckResponse,
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Content classified", "model": SpamCheckResponse},
        413: {"description": "Content is too long", "model": ErrorResponse},
        400: {"description": "Content is not usable text", "model": ErrorResponse},
        424: {
            "description": "Provider refused to classify the content; treat as 'cannot classify', not 'not spam'",
            "model": ErrorResponse,
        },
        502: {"description": "Provider returned an invalid verdict", "model": ErrorResponse},
        503: {"description": "Provider is unavailable", "model": ErrorResponse},
        504: {"description": "Provider timed out", "model": ErrorResponse},
    },
    summary="Check content for spam",
    description="Ask the configured language model whether the submitted text is spam.",
    operation_id="check_content_for_spam",
)
async def spam_check(
    request: SpamCheckRequest,
    classifier: Annotated[SpamClassifier, Depends(get_spam_classifier)],
) -> SpamCheckResponse:
    """Classify submitted text as spam or not spam.

    Each failure kind maps to its own status code so callers can choose to
    fail open or closed per kind.

    Raises:
        HTTPException: If the content is rejected or classification fails
    """
    LOGGER.info("Received spam check request", extra={"content_length": len(request.content)})

    try:
        result = await classifier.classify(request.content)
    except (InvalidContentError, ProviderRefusedError,
            SchemaValidationFailedError, ProviderUnavailableError) as e:
        status_code, message = next(
            (code, msg) for error_type, code, msg in ERROR_STATUS if isinstance(e, error_type)
        )
        LOGGER.warning(
            message,
            extra={"error_kind": type(e).__name__, "error": str(e), "status_code": status_code},
        )
        raise HTTPException(
            status_code=status_code,
            detail=ErrorResponse(
                error=type(e).__name__,
                message=message,
                detail=str(e),
            ).model_dump(),
        ) from e

    return SpamCheckResponse(is_spam=result.is_spam)
