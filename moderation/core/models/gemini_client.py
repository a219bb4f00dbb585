from typing import Any, Dict, List, Optional, Type, Union

import httpx
from google import genai
from google.genai import errors, types
from pydantic import BaseModel

from moderation.core.exceptions import (
    ProviderRefusedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Candidate finish reasons that mean the output was withheld by policy
REFUSAL_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"}


class GeminiClient:
    """Wrapper for Google Gemini API client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: int = 60,
    ):
        """Initialize Gemini client.

        A missing or rejected key is not raised here; it surfaces as
        ProviderUnavailableError on the first call.

        Args:
            api_key: Gemini API key (empty to fall back to GOOGLE_API_KEY)
            model: Model name to use
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.client = None
        self._init_error: Optional[Exception] = None

        try:
            self.client = genai.Client(
                api_key=self.api_key or None,
                http_options=types.HttpOptions(timeout=timeout * 1000),
            )
            LOGGER.info(f"Initialized Gemini client with model {self.model}")
        except ValueError as e:
            LOGGER.warning(f"Gemini client is not usable: {e}")
            self._init_error = e

    def _require_client(self) -> "genai.Client":
        if self.client is None:
            raise ProviderUnavailableError(
                f"Gemini client is not configured: {self._init_error}",
                original_error=self._init_error,
            )
        return self.client

    async def _generate(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        config: types.GenerateContentConfig,
    ) -> types.GenerateContentResponse:
        client = self._require_client()
        try:
            return await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config
            )
        except errors.APIError as e:
            LOGGER.warning(f"Gemini API error: {e}", extra={"status_code": e.code})
            raise ProviderUnavailableError(
                f"Gemini generation failed: {e}",
                original_error=e,
                status_code=e.code,
            ) from e
        except httpx.TimeoutException as e:
            LOGGER.warning(f"Gemini API timeout after {self.timeout}s")
            raise ProviderTimeoutError(
                f"Gemini API timeout after {self.timeout}s", original_error=e
            ) from e
        except (httpx.HTTPError, ConnectionError) as e:
            LOGGER.warning(f"Gemini API unreachable: {e}")
            raise ProviderUnavailableError(
                f"Gemini API unreachable: {e}", original_error=e
            ) from e

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate free-form text using Gemini model.

        Args:
            contents: Input content (string or list of parts)
            system_instruction: Optional system instruction

        Returns:
            Generated text response
        """
        config = types.GenerateContentConfig(
            temperature=0.0,
            system_instruction=system_instruction,
        )
        response = await self._generate(contents, config)
        return response.text or ""

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate JSON constrained to ``response_model``.

        Args:
            prompt: User prompt
            response_model: Pydantic model describing the expected output
            system_instruction: Optional system instruction

        Returns:
            Raw JSON text produced by the model (not yet validated)

        Raises:
            ProviderRefusedError: If the prompt or the answer is blocked by safety filters
            ProviderUnavailableError: If the API call fails
        """
        config = types.GenerateContentConfig(
            temperature=0.0,
            response_mime_type="application/json",
            response_schema=response_model,
            system_instruction=system_instruction,
        )
        response = await self._generate(prompt, config)

        feedback = response.prompt_feedback
        if feedback is not None and feedback.block_reason:
            LOGGER.warning(
                "Gemini blocked the prompt",
                extra={"block_reason": str(feedback.block_reason)}
            )
            raise ProviderRefusedError(f"Gemini blocked the prompt: {feedback.block_reason}")

        candidates = response.candidates or []
        if candidates and candidates[0].finish_reason in REFUSAL_FINISH_REASONS:
            LOGGER.warning(
                "Gemini withheld the answer",
                extra={"finish_reason": str(candidates[0].finish_reason)}
            )
            raise ProviderRefusedError(
                f"Gemini withheld the answer: {candidates[0].finish_reason}"
            )

        return response.text or ""
