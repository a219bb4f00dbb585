"""Health check API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from moderation.core.exceptions import ClassificationError
from moderation.core.unified_llm import UnifiedLLMClient
from moderation.dependencies import get_llm_client
from moderation.models.response.response import LLMHealthResponse
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health/llm",
    response_model=LLMHealthResponse,
    tags=["Health"],
    summary="LLM provider health check",
    description="Send a minimal prompt to the configured provider and report whether it answered",
    operation_id="get_llm_provider_health_status",
)
async def llm_health_check(
    llm_client: Annotated[UnifiedLLMClient, Depends(get_llm_client)],
) -> LLMHealthResponse:
    """Check connectivity to the configured LLM provider."""
    try:
        await llm_client.test_connection()
    except ClassificationError as e:
        LOGGER.warning(
            "LLM provider connection test failed",
            extra={"provider": llm_client.provider.value, "error": str(e)},
        )
        return LLMHealthResponse(
            status="unhealthy",
            provider=llm_client.provider.value,
            model=llm_client.model,
            error=str(e),
        )

    return LLMHealthResponse(
        status="healthy",
        provider=llm_client.provider.value,
        model=llm_client.model,
    )
