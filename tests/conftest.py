"""Pytest configuration and shared fixtures."""

import asyncio
from typing import List, Optional, Type

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from moderation.main import app
from moderation.services.classification.spam_classifier import SpamClassifier


class StubProvider:
    """Structured generation provider returning canned output.

    Records every call so tests can check what the classifier sent.
    """

    def __init__(
        self,
        output: Optional[str] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.output = output
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    async def generate_structured(
        self,
        prompt: str,
        response_model: Type[BaseModel],
        system_instruction: Optional[str] = None,
    ) -> str:
        self.calls.append({
            "prompt": prompt,
            "response_model": response_model,
            "system_instruction": system_instruction,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def stub_provider_factory():
    """Build StubProvider instances."""
    return StubProvider


@pytest.fixture
def make_classifier():
    """Build a SpamClassifier around a stub provider."""
    def _make(provider, **kwargs) -> SpamClassifier:
        return SpamClassifier(provider=provider, **kwargs)
    return _make


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def spam_content() -> str:
    return "Buy cheap pills now!!! Click here"


@pytest.fixture
def job_seeker_content() -> str:
    return "Looking for a senior backend engineer role in Lagos"
