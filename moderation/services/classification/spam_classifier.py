"""LLM-backed spam gate for user-submitted text.

The judgment itself is delegated to a structured generation provider. The
provider is asked for a ``SpamVerdict`` JSON document rather than prose, and
that document is validated before a result is returned.
"""

import asyncio
from typing import Optional

from moderation.core.exceptions import (
    ContentTooLongError,
    InvalidContentError,
    ProviderTimeoutError,
)
from moderation.core.structured_output import decode_structured
from moderation.core.unified_llm import StructuredGenerationProvider
from moderation.prompts.system_prompts import SPAM_CHECK_PROMPT, SPAM_CHECK_SYSTEM_PROMPT
from moderation.services.classification.schemas import (
    ClassificationRequest,
    ClassificationResult,
    SpamVerdict,
)
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)


class SpamClassifier:
    """Decides whether a piece of submitted text is spam.

    Holds no mutable state, so a single instance can serve concurrent calls.
    """

    def __init__(
        self,
        provider: StructuredGenerationProvider,
        max_content_chars: Optional[int] = 10_000,
        timeout: Optional[float] = None,
    ):
        """Initialize the classifier.

        Args:
            provider: Structured generation provider used for every call
            max_content_chars: Longest accepted content, None to accept any length
            timeout: Default bound in seconds on a single classification call
        """
        self.provider = provider
        self.max_content_chars = max_content_chars
        self.timeout = timeout

    def build_request(self, content: str) -> ClassificationRequest:
        """Validate raw input and wrap it in a request.

        Raises:
            InvalidContentError: If content is not a string
            ContentTooLongError: If content exceeds ``max_content_chars``
        """
        if not isinstance(content, str):
            raise InvalidContentError(
                f"Content must be a string, got {type(content).__name__}"
            )
        if self.max_content_chars is not None and len(content) > self.max_content_chars:
            raise ContentTooLongError(len(content), self.max_content_chars)
        return ClassificationRequest(content=content)

    async def classify(
        self,
        content: str,
        timeout: Optional[float] = None,
    ) -> ClassificationResult:
        """Classify content as spam or not spam.

        Issues exactly one provider call. Nothing is retried or cached.

        Args:
            content: Text to judge; the empty string is valid
            timeout: Bound on the provider call in seconds, overriding the default

        Returns:
            ClassificationResult with the decoded verdict

        Raises:
            InvalidContentError: If content is not a string
            ContentTooLongError: If content is longer than allowed
            ProviderUnavailableError: If the provider cannot be reached
            ProviderTimeoutError: If the call exceeds the time bound
            ProviderRefusedError: If the provider declines to answer
            SchemaValidationFailedError: If the answer does not match SpamVerdict
        """
        request = self.build_request(content)
        prompt = SPAM_CHECK_PROMPT.format(content=request.content)
        bound = timeout if timeout is not None else self.timeout

        LOGGER.debug(
            "Running spam check",
            extra={"content_length": len(request.content), "timeout": bound}
        )

        call = self.provider.generate_structured(
            prompt=prompt,
            response_model=SpamVerdict,
            system_instruction=SPAM_CHECK_SYSTEM_PROMPT,
        )
        try:
            if bound is None:
                raw = await call
            else:
                raw = await asyncio.wait_for(call, timeout=bound)
        except asyncio.TimeoutError as e:
            LOGGER.warning(f"Spam check timed out after {bound}s")
            raise ProviderTimeoutError(
                f"Spam check timed out after {bound}s", original_error=e
            ) from e

        verdict = decode_structured(raw, SpamVerdict)

        LOGGER.info(
            "Spam check completed",
            extra={"content_length": len(request.content), "is_spam": verdict.is_spam}
        )
        return ClassificationResult(is_spam=verdict.is_spam)

    async def is_spam(self, content: str, timeout: Optional[float] = None) -> bool:
        """Return only the boolean verdict for ``content``."""
        result = await self.classify(content, timeout=timeout)
        return result.is_spam
