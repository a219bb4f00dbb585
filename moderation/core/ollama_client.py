"""Ollama LLM client implementation."""

from typing import Any, Dict, List, Optional, Type, Union

import httpx
import ollama
from pydantic import BaseModel

from moderation.core.exceptions import (
    ProviderTimeoutError,
    ProviderUnavailableError,
    SchemaValidationFailedError,
)
from moderation.core.structured_output import json_schema_for
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _normalize_host(base_url: str) -> str:
    """Reduce a base URL to the ``host:port`` form the Ollama client expects."""
    host = base_url
    if host.startswith("http://"):
        host = host[7:]
    elif host.startswith("https://"):
        host = host[8:]
    # Remove any trailing paths (like /v1, /api, etc.)
    if "/" in host:
        host = host.split("/")[0]
    return host


class OllamaClient:
    """Wrapper for Ollama API client.

    Provides the same interface as the hosted provider clients while using
    a local Ollama server. Ollama has no content-policy layer, so it never
    raises ProviderRefusedError.
    """

    def __init__(
        self,
        model: str = "llama3.1:8b",
        base_url: str = "http://localhost:11434",
        timeout: int = 60,
    ):
        """Initialize Ollama client.

        Args:
            model: Model name to use (e.g., "llama3.1:8b")
            base_url: Ollama API base URL (default: http://localhost:11434)
            timeout: Request timeout in seconds
        """
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

        host = _normalize_host(base_url)
        self.client = ollama.AsyncClient(host=host, timeout=timeout)
        LOGGER.info(f"Initialized Ollama client with model {self.model} at {host} (timeout: {timeout}s)")

    @staticmethod
    def _build_messages(
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
    ) -> List[Dict[str, str]]:
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        if isinstance(contents, str):
            user_content = contents
        else:
            user_content = "".join(
                part if isinstance(part, str) else part.get("text", "")
                for part in contents
            )
        messages.append({"role": "user", "content": user_content})
        return messages

    async def _chat(self, **chat_kwargs: Any) -> str:
        try:
            response = await self.client.chat(
                model=self.model,
                options={"temperature": 0.0},
                **chat_kwargs,
            )
        except ollama.ResponseError as e:
            LOGGER.warning(f"Ollama API error: {e.error}", extra={"status_code": e.status_code})
            raise ProviderUnavailableError(
                f"Ollama generation failed: {e.error}",
                original_error=e,
                status_code=e.status_code,
            ) from e
        except httpx.TimeoutException as e:
            LOGGER.warning(f"Ollama API call timed out after {self.timeout}s")
            raise ProviderTimeoutError(
                f"Ollama API call timed out after {self.timeout}s", original_error=e
            ) from e
        except (ollama.RequestError, httpx.HTTPError, ConnectionError) as e:
            LOGGER.warning(f"Ollama API unreachable: {e}")
            raise ProviderUnavailableError(
                f"Ollama API unreachable: {e}", original_error=e
            ) from e

        message = getattr(response, "message", None)
        if message is None:
            LOGGER.error(
                f"Unexpected Ollama response format: {response}",
                extra={"response_type": type(response).__name__}
            )
            raise SchemaValidationFailedError("Invalid response format from Ollama")

        content = message.content or ""
        LOGGER.debug(
            "Ollama response received",
            extra={"model": self.model, "content_length": len(content)}
        )
        return content

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate free-form text using Ollama model."""
        return await self._chat(messages=self._build_messages(contents, system_instruction))

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate JSON constrained to ``response_model``'s schema.

        Args:
            prompt: User prompt
            response_model: Pydantic model describing the expected output
            system_instruction: Optional system instruction

        Returns:
            Raw JSON text produced by the model (not yet validated)

        Raises:
            ProviderUnavailableError: If the server is unreachable or errors out
        """
        return await self._chat(
            messages=self._build_messages(prompt, system_instruction),
            format=json_schema_for(response_model),
        )
