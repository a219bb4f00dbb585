from typing import Any, Dict, Optional

import httpx
from httpx import TimeoutException, HTTPStatusError

from moderation.core.exceptions import (
    ProviderRefusedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    SchemaValidationFailedError,
)
from moderation.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Error codes OpenAI-compatible APIs use for content-policy rejections
REFUSAL_ERROR_CODES = {"content_policy_violation", "content_filter"}


class BaseLLMClient:
    """Base client for LLM HTTP API interactions.

    Handles the HTTP request, timeout management and the translation of
    transport errors into provider errors. Each call is a single attempt;
    retrying is left to the caller.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the LLM client.

        Args:
            api_key: API key for authentication
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to substitute the network in tests)
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self.logger = LOGGER

    async def call_api(
        self,
        endpoint: str = "",
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded JSON response.

        Args:
            endpoint: API endpoint (appended to base_url)
            payload: JSON payload
            headers: Additional headers

        Returns:
            Parsed JSON response

        Raises:
            ProviderTimeoutError: If the request times out
            ProviderRefusedError: If the API rejects the request on content-policy grounds
            ProviderUnavailableError: If the API cannot be reached or answers with an error status
            SchemaValidationFailedError: If the response body is not a JSON object
        """
        url = f"{self.base_url}{endpoint}" if endpoint else self.base_url

        default_headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        if headers:
            default_headers.update(headers)

        self.logger.debug(
            f"Calling LLM API: {url}",
            extra={"timeout": self.timeout}
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, headers=default_headers, json=payload)
                response.raise_for_status()
        except HTTPStatusError as e:
            self._handle_http_error(e, url)
        except TimeoutException as e:
            self.logger.warning("API Timeout", extra={"url": url})
            raise ProviderTimeoutError(
                f"API Timeout after {self.timeout}s", original_error=e
            ) from e
        except httpx.HTTPError as e:
            self.logger.warning(
                "API transport error",
                extra={"url": url, "error": str(e)}
            )
            raise ProviderUnavailableError(
                f"API unreachable: {e}", original_error=e
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise SchemaValidationFailedError(
                "API returned a non-JSON body",
                original_error=e,
                raw_output=response.text[:500],
            ) from e

        if not isinstance(body, dict):
            raise SchemaValidationFailedError(
                "API returned an unexpected JSON document",
                raw_output=response.text[:500],
            )
        return body

    def _handle_http_error(self, error: HTTPStatusError, url: str):
        """Translate an HTTP status error into a provider error."""
        status_code = error.response.status_code

        try:
            error_body = error.response.text
        except httpx.ResponseNotRead:
            error_body = "Could not read response body"

        self.logger.warning(
            "API HTTP error",
            extra={
                "url": url,
                "status_code": status_code,
                "error_body": error_body[:500]  # Truncate for logs
            }
        )

        if 400 <= status_code < 500 and self._error_code(error.response) in REFUSAL_ERROR_CODES:
            raise ProviderRefusedError(
                f"API refused the request: {error_body[:200]}", original_error=error
            ) from error

        raise ProviderUnavailableError(
            f"API HTTP Error {status_code}",
            original_error=error,
            status_code=status_code,
        ) from error

    @staticmethod
    def _error_code(response: httpx.Response) -> Optional[str]:
        """Extract ``error.code`` from an error response, if present."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            return body["error"].get("code")
        return None
