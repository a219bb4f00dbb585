"""Tests for the OpenAI-compatible chat completions client."""

import json

import httpx
import pytest

from moderation.core.exceptions import (
    ProviderRefusedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    SchemaValidationFailedError,
)
from moderation.core.openai_client import OpenAICompatibleClient
from moderation.services.classification.schemas import SpamVerdict
from moderation.services.classification.spam_classifier import SpamClassifier

API_URL = "https://api.example.test/v1/chat/completions"


def completion(content=None, refusal=None, finish_reason="stop"):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content, "refusal": refusal},
                "finish_reason": finish_reason,
            }
        ],
    }


def make_client(handler) -> OpenAICompatibleClient:
    return OpenAICompatibleClient(
        api_key="sk-test",
        model="gpt-4o-mini",
        base_url=API_URL,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


class TestStructuredRequest:

    @pytest.mark.asyncio
    async def test_sends_strict_json_schema(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion('{"isSpam": true}'))

        client = make_client(handler)

        raw = await client.generate_structured(
            prompt="Is this spam?",
            response_model=SpamVerdict,
            system_instruction="You are a moderator.",
        )

        assert raw == '{"isSpam": true}'
        assert captured["url"] == API_URL
        assert captured["auth"] == "Bearer sk-test"

        body = captured["body"]
        assert body["model"] == "gpt-4o-mini"
        assert body["temperature"] == 0.0
        assert body["messages"] == [
            {"role": "system", "content": "You are a moderator."},
            {"role": "user", "content": "Is this spam?"},
        ]

        response_format = body["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["strict"] is True
        schema = response_format["json_schema"]["schema"]
        assert schema["properties"]["isSpam"]["type"] == "boolean"
        assert schema["required"] == ["isSpam"]
        assert schema["additionalProperties"] is False

    @pytest.mark.asyncio
    async def test_free_text_generation(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert "response_format" not in body
            return httpx.Response(200, json=completion("OK"))

        client = make_client(handler)

        assert await client.generate_content("Say OK") == "OK"


class TestRefusals:

    @pytest.mark.asyncio
    async def test_refusal_field(self):
        client = make_client(
            lambda request: httpx.Response(200, json=completion(refusal="I can't help with that."))
        )

        with pytest.raises(ProviderRefusedError):
            await client.generate_structured("prompt", SpamVerdict)

    @pytest.mark.asyncio
    async def test_content_filter_finish_reason(self):
        client = make_client(
            lambda request: httpx.Response(
                200, json=completion(None, finish_reason="content_filter")
            )
        )

        with pytest.raises(ProviderRefusedError):
            await client.generate_structured("prompt", SpamVerdict)

    @pytest.mark.asyncio
    async def test_content_policy_error_code(self):
        client = make_client(
            lambda request: httpx.Response(
                400,
                json={"error": {"message": "rejected", "code": "content_policy_violation"}},
            )
        )

        with pytest.raises(ProviderRefusedError):
            await client.generate_structured("prompt", SpamVerdict)


class TestUnavailable:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 429, 500, 503])
    async def test_error_status(self, status_code):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(status_code, json={"error": {"message": "nope"}})

        client = make_client(handler)

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await client.generate_structured("prompt", SpamVerdict)

        assert exc_info.value.status_code == status_code
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_connect_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await client.generate_structured("prompt", SpamVerdict)

        assert not isinstance(exc_info.value, ProviderTimeoutError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(ProviderTimeoutError):
            await client.generate_structured("prompt", SpamVerdict)


class TestMalformedEnvelope:

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(SchemaValidationFailedError):
            await client.generate_structured("prompt", SpamVerdict)

    @pytest.mark.asyncio
    async def test_missing_choices(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(SchemaValidationFailedError):
            await client.generate_structured("prompt", SpamVerdict)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"choices": ["oops"]},
            {"choices": {"0": {}}},
            {"choices": [{"message": "oops"}]},
            {"choices": [{"message": {"content": [
                {"type": "text", "text": '{"isSpam": true}'}
            ]}}]},
            {"choices": [{"message": {"content": {"isSpam": True}}}]},
        ],
    )
    async def test_wrongly_shaped_envelope(self, body):
        client = make_client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(SchemaValidationFailedError):
            await client.generate_structured("prompt", SpamVerdict)

    @pytest.mark.asyncio
    async def test_wrongly_shaped_envelope_fails_classification(self):
        body = {"choices": [{"message": {"content": {"isSpam": True}}}]}
        classifier = SpamClassifier(
            provider=make_client(lambda request: httpx.Response(200, json=body))
        )

        with pytest.raises(SchemaValidationFailedError):
            await classifier.classify("hello")

    @pytest.mark.asyncio
    async def test_non_text_content_in_free_text_generation(self):
        body = {"choices": [{"message": {"content": ["OK"]}}]}
        client = make_client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(SchemaValidationFailedError):
            await client.generate_content("Say OK")

    @pytest.mark.asyncio
    async def test_null_content_is_returned_as_empty_text(self):
        client = make_client(lambda request: httpx.Response(200, json=completion(None)))

        assert await client.generate_structured("prompt", SpamVerdict) == ""
