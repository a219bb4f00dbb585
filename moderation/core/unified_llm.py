"""Unified LLM client factory and manager.

Provides a unified interface for interacting with different LLM providers
(OpenAI, OpenRouter, Gemini, Ollama) with provider selection based on configuration.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Type, Union

from pydantic import BaseModel

from moderation.config import Settings
from moderation.core.exceptions import ProviderUnavailableError
from moderation.core.models.gemini_client import GeminiClient
from moderation.core.ollama_client import OllamaClient
from moderation.core.openai_client import OpenAICompatibleClient
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)

CONNECTION_TEST_PROMPT = "Say 'OK' if you can read this."


class StructuredGenerationProvider(Protocol):
    """Anything that can produce schema-constrained output for a prompt."""

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
    ) -> str: ...


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    GEMINI = "gemini"
    OLLAMA = "ollama"


class UnifiedLLMClient:
    """Unified LLM client that wraps different providers.

    Provides a consistent interface regardless of the underlying provider.
    Every call goes to exactly one provider; there is no cross-provider
    fallback.
    """

    def __init__(
        self,
        provider: Union[str, LLMProvider],
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: int = 60,
    ):
        """Initialize unified LLM client.

        Args:
            provider: LLM provider to use ("openai", "openrouter", "gemini" or "ollama")
            api_key: API key for the provider (ignored for Ollama)
            model: Model name to use
            base_url: Optional base URL (for OpenAI-compatible APIs or Ollama)
            timeout: Request timeout in seconds
        """
        self.provider = LLMProvider(provider)
        self.model = model
        self.timeout = timeout

        if self.provider == LLMProvider.GEMINI:
            self.client = GeminiClient(
                api_key=api_key,
                model=model,
                timeout=timeout,
            )

        elif self.provider == LLMProvider.OPENAI:
            self.client = OpenAICompatibleClient(
                api_key=api_key,
                model=model,
                base_url=base_url or "https://api.openai.com/v1/chat/completions",
                timeout=timeout,
            )

        elif self.provider == LLMProvider.OPENROUTER:
            self.client = OpenAICompatibleClient(
                api_key=api_key,
                model=model,
                base_url=base_url or "https://openrouter.ai/api/v1/chat/completions",
                timeout=timeout,
            )

        else:
            self.client = OllamaClient(
                model=model,
                base_url=base_url or "http://localhost:11434",
                timeout=timeout,
            )

        LOGGER.info(f"Initialized unified LLM with {self.provider.value} provider (model: {model})")

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate free-form text using the configured LLM provider."""
        return await self.client.generate_content(
            contents=contents,
            system_instruction=system_instruction,
        )

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate output constrained to ``response_model``.

        Returns:
            Raw JSON text; callers decode it with ``decode_structured``

        Raises:
            ProviderUnavailableError: If the provider cannot be reached
            ProviderRefusedError: If the provider declines under its content policy
            SchemaValidationFailedError: If the provider's envelope is malformed
        """
        return await self.client.generate_structured(
            prompt=prompt,
            response_model=response_model,
            system_instruction=system_instruction,
        )

    async def test_connection(self) -> None:
        """Send a minimal prompt to verify the provider answers.

        Raises:
            ProviderUnavailableError: If the provider does not answer with text
        """
        text = await self.generate_content(CONNECTION_TEST_PROMPT)
        if not text.strip():
            raise ProviderUnavailableError(
                f"Connection test failed: {self.provider.value} returned an empty response"
            )


def create_llm_client(
    provider: Union[str, LLMProvider],
    api_key: str,
    model: str,
    base_url: Optional[str] = None,
    timeout: int = 60,
) -> UnifiedLLMClient:
    """Factory function to create a unified LLM client.

    Args:
        provider: LLM provider to use
        api_key: API key for the provider (ignored for Ollama)
        model: Model name to use
        base_url: Optional base URL
        timeout: Request timeout in seconds

    Returns:
        UnifiedLLMClient instance
    """
    return UnifiedLLMClient(
        provider=provider,
        api_key=api_key,
        model=model,
        base_url=base_url,
        timeout=timeout,
    )


def create_llm_client_from_settings(settings: Settings) -> UnifiedLLMClient:
    """Create a unified LLM client from configuration settings.

    Selects the API key, model and base URL matching ``settings.llm_provider``.
    Credentials are passed through as configured; a missing key is reported by
    the provider on the first call, not here.

    Args:
        settings: Application settings

    Returns:
        UnifiedLLMClient instance configured with the specified provider

    Raises:
        ValueError: If the provider name is not supported
    """
    provider = LLMProvider(settings.llm_provider.strip().lower())

    if provider == LLMProvider.OPENAI:
        api_key, model, base_url = (
            settings.openai_api_key, settings.openai_model, settings.openai_api_url
        )
    elif provider == LLMProvider.OPENROUTER:
        api_key, model, base_url = (
            settings.openrouter_api_key, settings.openrouter_model, settings.openrouter_api_url
        )
    elif provider == LLMProvider.GEMINI:
        api_key, model, base_url = settings.gemini_api_key, settings.gemini_model, None
    else:
        api_key, model, base_url = "", settings.ollama_model, settings.ollama_api_url

    return create_llm_client(
        provider=provider,
        api_key=api_key.strip(),
        model=model,
        base_url=base_url,
        timeout=settings.llm_timeout,
    )
