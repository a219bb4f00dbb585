"""OpenAI-compatible chat completions client (OpenAI, OpenRouter)."""

import copy
from typing import Any, Dict, List, Optional, Tuple, Type, Union

import httpx
from pydantic import BaseModel

from moderation.core.base_llm_client import BaseLLMClient
from moderation.core.exceptions import ProviderRefusedError, SchemaValidationFailedError
from moderation.core.structured_output import json_schema_for
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OpenAICompatibleClient:
    """Wrapper for OpenAI-style chat completion APIs.

    Structured output uses ``response_format`` with a strict JSON schema, so
    the model is constrained to the response model instead of free text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1/chat/completions",
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: API key sent as a bearer token
            model: Model name to use (e.g., "gpt-4o-mini")
            base_url: Full chat completions URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport override
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

        LOGGER.info(f"Initialized OpenAI-compatible client with model {self.model}")

    @staticmethod
    def _build_messages(
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
    ) -> List[Dict[str, str]]:
        messages = []

        if system_instruction:
            messages.append({
                "role": "system",
                "content": system_instruction
            })

        if isinstance(contents, str):
            user_content = contents
        else:
            # Handle list of content parts
            user_content = ""
            for part in contents:
                if isinstance(part, str):
                    user_content += part
                elif isinstance(part, dict) and "text" in part:
                    user_content += part["text"]

        messages.append({
            "role": "user",
            "content": user_content
        })
        return messages

    @staticmethod
    def _response_format(response_model: Type[BaseModel]) -> Dict[str, Any]:
        schema = copy.deepcopy(json_schema_for(response_model))
        # Strict mode requires a closed object with every property required
        schema["additionalProperties"] = False
        schema["required"] = list(schema.get("properties", {}).keys())
        return {
            "type": "json_schema",
            "json_schema": {
                "name": response_model.__name__,
                "strict": True,
                "schema": schema,
            },
        }

    async def _complete(self, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Send a completion request and return its first choice and message.

        Raises:
            SchemaValidationFailedError: If choices, choice or message have the wrong shape
        """
        response = await self.client.call_api(payload=payload)

        choices = response.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            LOGGER.error(f"Unexpected chat completion response format: {response}")
            raise SchemaValidationFailedError(
                "Chat completion response has no usable choices",
                raw_output=str(response)[:500],
            )

        choice = choices[0]
        message = choice.get("message")
        if message is None:
            message = {}
        if not isinstance(message, dict):
            LOGGER.error(f"Unexpected chat completion message: {message!r}")
            raise SchemaValidationFailedError(
                "Chat completion message is not an object",
                raw_output=str(response)[:500],
            )
        return choice, message

    @staticmethod
    def _text_content(message: Dict[str, Any]) -> str:
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise SchemaValidationFailedError(
                f"Chat completion content is {type(content).__name__}, expected text",
                raw_output=str(content)[:500],
            )
        return content

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate free-form text.

        Args:
            contents: Input content (string or list of parts)
            system_instruction: Optional system instruction

        Returns:
            Generated text response
        """
        payload = {
            "model": self.model,
            "messages": self._build_messages(contents, system_instruction),
            "temperature": 0.0,
        }
        _, message = await self._complete(payload)
        return self._text_content(message)

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate output constrained to ``response_model``'s JSON schema.

        Args:
            prompt: User prompt
            response_model: Pydantic model describing the expected output
            system_instruction: Optional system instruction

        Returns:
            Raw JSON text produced by the model (not yet validated)

        Raises:
            ProviderRefusedError: If the model refuses or output is content-filtered
            ProviderUnavailableError: If the API call fails
            SchemaValidationFailedError: If the response envelope is malformed
        """
        payload = {
            "model": self.model,
            "messages": self._build_messages(prompt, system_instruction),
            "temperature": 0.0,
            "response_format": self._response_format(response_model),
        }

        choice, message = await self._complete(payload)

        refusal = message.get("refusal")
        if refusal:
            LOGGER.warning("Model refused structured request", extra={"model": self.model})
            raise ProviderRefusedError(f"Model refused to respond: {refusal}")

        if choice.get("finish_reason") == "content_filter":
            LOGGER.warning("Output blocked by content filter", extra={"model": self.model})
            raise ProviderRefusedError("Output blocked by the provider's content filter")

        return self._text_content(message)
