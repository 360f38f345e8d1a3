"""Pytest fixtures for HTTP integration tests.

The FastAPI app is exercised in-process through TestClient; the model is
replaced by a stub so no API key or network access is needed.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.pipeline.generator import RecipeGenerator
from src.utils.config import Config

STIR_FRY_RESPONSE = (
    '{"title":"Stir-fry","description":"Tasty","ingredients":["onion","onion","chicken thigh"],'
    '"instructions":["1. cut","ok"],"cookingTime":0,"servings":2}'
)


class StubModelClient:
    """Returns the same model answer for every call."""

    def __init__(self, response: str = STIR_FRY_RESPONSE):
        self.response = response
        self.calls = []

    async def generate(self, prompt, images):
        self.calls.append((prompt, images))
        return self.response


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("CORS_ORIGIN", "http://localhost:3000,https://recipes.example.com")
    return Config()


@pytest.fixture
def model_client():
    return StubModelClient()


@pytest.fixture
def client_for(settings):
    """Factory for a client backed by a stub model that always answers `response`."""

    def _make(response: str = STIR_FRY_RESPONSE) -> tuple[TestClient, StubModelClient]:
        stub = StubModelClient(response)
        generator = RecipeGenerator(stub, sleep=AsyncMock())
        return TestClient(create_app(generator=generator, settings=settings)), stub

    return _make


@pytest.fixture
def client(settings, model_client):
    generator = RecipeGenerator(model_client, sleep=AsyncMock())
    with TestClient(create_app(generator=generator, settings=settings)) as test_client:
        yield test_client


@pytest.fixture
def failing_client(settings):
    """Factory for a client whose generator raises the given exception."""

    def _make(exc: Exception) -> TestClient:
        generator = Mock(generate=AsyncMock(side_effect=exc))
        return TestClient(create_app(generator=generator, settings=settings))

    return _make
