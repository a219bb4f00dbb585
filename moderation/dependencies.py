"""Dependency injection for the FastAPI application.

Long-lived objects (the LLM client and the classifier built on it) are
created once in the application lifespan and kept on ``app.state``. These
providers hand them to endpoints and can be replaced through
``app.dependency_overrides``.
"""

from fastapi import Request

from moderation.config import Settings
from moderation.core.unified_llm import UnifiedLLMClient, create_llm_client_from_settings
from moderation.services.classification.spam_classifier import SpamClassifier


def build_spam_classifier(settings: Settings, llm_client: UnifiedLLMClient) -> SpamClassifier:
    """Create the spam classifier from settings and an LLM client.

    Args:
        settings: Application settings
        llm_client: Client used for every classification call

    Returns:
        SpamClassifier: Configured classifier
    """
    return SpamClassifier(
        provider=llm_client,
        max_content_chars=settings.spam_max_content_chars,
        timeout=settings.spam_check_timeout,
    )


def init_services(app_state, settings: Settings) -> None:
    """Build the LLM client and classifier and attach them to ``app_state``."""
    llm_client = create_llm_client_from_settings(settings)
    app_state.llm_client = llm_client
    app_state.spam_classifier = build_spam_classifier(settings, llm_client)


async def get_llm_client(request: Request) -> UnifiedLLMClient:
    """Get the LLM client created at startup.

    Returns:
        UnifiedLLMClient: Shared provider client
    """
    return request.app.state.llm_client


async def get_spam_classifier(request: Request) -> SpamClassifier:
    """Get the spam classifier created at startup.

    Returns:
        SpamClassifier: Shared classifier instance
    """
    return request.app.state.spam_classifier
