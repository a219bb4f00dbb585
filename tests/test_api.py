"""Tests for API endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from moderation.core.exceptions import (
    ContentTooLongError,
    InvalidContentError,
    ProviderRefusedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    SchemaValidationFailedError,
)
from moderation.core.unified_llm import LLMProvider
from moderation.dependencies import get_llm_client, get_spam_classifier
from moderation.main import app
from moderation.services.classification.schemas import ClassificationResult

SPAM_CHECK_URL = "/api/v1/moderation/spam-check"


class TestSpamCheckEndpoint:
    """Test suite for the spam check endpoint."""

    def test_spam_check_returns_verdict(self, test_client: TestClient, spam_content: str) -> None:
        mock_classifier = AsyncMock()
        mock_classifier.classify.return_value = ClassificationResult(is_spam=True)
        app.dependency_overrides[get_spam_classifier] = lambda: mock_classifier

        response = test_client.post(SPAM_CHECK_URL, json={"content": spam_content})

        assert response.status_code == 200
        assert response.json() == {"isSpam": True}
        mock_classifier.classify.assert_awaited_once_with(spam_content)

    def test_spam_check_with_real_classifier(
        self, test_client: TestClient, stub_provider_factory, make_classifier,
        job_seeker_content: str,
    ) -> None:
        provider = stub_provider_factory(output='{"isSpam": false}')
        classifier = make_classifier(provider)
        app.dependency_overrides[get_spam_classifier] = lambda: classifier

        response = test_client.post(SPAM_CHECK_URL, json={"content": job_seeker_content})

        assert response.status_code == 200
        assert response.json() == {"isSpam": False}
        assert len(provider.calls) == 1

    def test_empty_content_is_accepted(self, test_client: TestClient) -> None:
        mock_classifier = AsyncMock()
        mock_classifier.classify.return_value = ClassificationResult(is_spam=False)
        app.dependency_overrides[get_spam_classifier] = lambda: mock_classifier

        response = test_client.post(SPAM_CHECK_URL, json={"content": ""})

        assert response.status_code == 200
        mock_classifier.classify.assert_awaited_once_with("")

    def test_missing_content(self, test_client: TestClient) -> None:
        app.dependency_overrides[get_spam_classifier] = lambda: AsyncMock()

        response = test_client.post(SPAM_CHECK_URL, json={})

        assert response.status_code == 422

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (ContentTooLongError(20_000, 10_000), 413),
            (InvalidContentError("Content must be a string, got bytes"), 400),
            (ProviderRefusedError("policy"), 424),
            (SchemaValidationFailedError("missing isSpam"), 502),
            (ProviderTimeoutError("slow"), 504),
            (ProviderUnavailableError("down", status_code=500), 503),
        ],
    )
    def test_error_kinds_map_to_status_codes(
        self, test_client: TestClient, error: Exception, status_code: int
    ) -> None:
        mock_classifier = AsyncMock()
        mock_classifier.classify.side_effect = error
        app.dependency_overrides[get_spam_classifier] = lambda: mock_classifier

        response = test_client.post(SPAM_CHECK_URL, json={"content": "anything"})

        assert response.status_code == status_code
        detail = response.json()["detail"]
        assert detail["error"] == type(error).__name__
        assert detail["detail"] == str(error)

    def test_refusal_status_differs_from_body_validation(self, test_client: TestClient) -> None:
        mock_classifier = AsyncMock()
        mock_classifier.classify.side_effect = ProviderRefusedError("policy")
        app.dependency_overrides[get_spam_classifier] = lambda: mock_classifier

        refused = test_client.post(SPAM_CHECK_URL, json={"content": "anything"})
        malformed = test_client.post(SPAM_CHECK_URL, json={"text": "anything"})

        assert malformed.status_code == 422
        assert refused.status_code != malformed.status_code


class TestHealthEndpoints:

    def test_health(self, test_client: TestClient) -> None:
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, test_client: TestClient) -> None:
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_openapi_schema_without_redoc(self, test_client: TestClient) -> None:
        schema = test_client.get("/openapi.json").json()

        assert schema["paths"][SPAM_CHECK_URL]["post"]["operationId"] == "check_content_for_spam"
        assert test_client.get("/redoc").status_code == 404

    def test_llm_health_healthy(self, test_client: TestClient) -> None:
        mock_client = AsyncMock()
        mock_client.provider = LLMProvider.OPENAI
        mock_client.model = "gpt-4o-mini"
        app.dependency_overrides[get_llm_client] = lambda: mock_client

        response = test_client.get("/api/v1/health/llm")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "provider": "openai",
            "model": "gpt-4o-mini",
            "error": None,
        }

    def test_llm_health_unhealthy(self, test_client: TestClient) -> None:
        mock_client = AsyncMock()
        mock_client.provider = LLMProvider.GEMINI
        mock_client.model = "gemini-2.0-flash"
        mock_client.test_connection.side_effect = ProviderUnavailableError("no key")
        app.dependency_overrides[get_llm_client] = lambda: mock_client

        response = test_client.get("/api/v1/health/llm")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["error"] == "no key"
