"""Pytest fixtures for API tests."""

import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from story_proxy.api.config import Settings
from story_proxy.api.dependencies import get_gemini_client
from story_proxy.api.main import create_app
from story_proxy.api.services.gemini_client import GeminiClient

TEST_API_KEY = "test-gemini-key-for-unit-tests"


def gemini_body(text):
    """A minimal successful generateContent response body."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def settings():
    """Settings with a fake API key and the default model."""
    return Settings(gemini_api_key=TEST_API_KEY)


@pytest.fixture
def app(settings):
    """A fresh application built around the test settings."""
    return create_app(settings)


@pytest.fixture
def client(app):
    """TestClient with real dependencies. Outbound calls must be patched."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def mock_gemini(settings):
    """Create a mock Gemini client for route tests."""
    gemini = AsyncMock(spec=GeminiClient)
    gemini.endpoint = settings.generate_url
    gemini.generate.return_value = gemini_body("Once upon a time...")
    return gemini


@pytest.fixture
def client_with_mocks(app, mock_gemini):
    """TestClient with the Gemini client dependency overridden."""
    app.dependency_overrides[get_gemini_client] = lambda: mock_gemini

    with TestClient(app) as client:
        yield client, mock_gemini

    app.dependency_overrides.clear()
