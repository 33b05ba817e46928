"""Tests for the Gemini client, payload building and text extraction."""

import asyncio

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from story_proxy.api.config import Settings
from story_proxy.api.errors import UpstreamError
from story_proxy.api.services.gemini_client import (
    GENERATION_CONFIG,
    GeminiClient,
    build_payload,
    extract_text,
)

from tests.unit.conftest import TEST_API_KEY, gemini_body

GENERATE_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash:generateContent"
)


def create_mock_async_client(mock_response=None, side_effect=None):
    """Create a mock AsyncClient whose post returns the given response."""
    mock_client = AsyncMock()
    mock_client.post = AsyncMock(return_value=mock_response, side_effect=side_effect)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    return mock_client


class TestBuildPayload:
    """Tests for the generateContent request body."""

    def test_payload_shape(self):
        payload = build_payload("Be gentle.", "fox")

        assert payload["system_instruction"] == {"parts": [{"text": "Be gentle."}]}
        assert payload["contents"] == [{"role": "user", "parts": [{"text": "fox"}]}]
        assert payload["generationConfig"] == {
            "temperature": 0.7,
            "maxOutputTokens": 2000,
            "topP": 0.9,
            "topK": 40,
            "frequencyPenalty": 0.2,
            "presencePenalty": 0.15,
        }

    def test_missing_animal_falls_back(self):
        payload = build_payload("Be gentle.", "")
        assert payload["contents"][0]["parts"][0]["text"] == "animal"

    def test_generation_config_is_copied(self):
        """Mutating one payload must not leak into the module constant."""
        payload = build_payload("x", "fox")
        payload["generationConfig"]["temperature"] = 2.0
        assert GENERATION_CONFIG["temperature"] == 0.7


class TestExtractText:
    """Tests for lenient text extraction."""

    def test_extracts_first_candidate_first_part(self):
        body = {
            "candidates": [
                {"content": {"parts": [{"text": "first"}, {"text": "second"}]}},
                {"content": {"parts": [{"text": "other"}]}},
            ]
        }
        assert extract_text(body) == "first"

    def test_text_returned_verbatim(self):
        text = "  Once upon a time...\n\n"
        assert extract_text(gemini_body(text)) == text

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"candidates": []},
            {"candidates": None},
            {"candidates": [{}]},
            {"candidates": [{"content": {}}]},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{}]}}]},
            {"candidates": [{"content": {"parts": [{"text": None}]}}]},
            {"candidates": [{"finishReason": "SAFETY"}]},
            ["not", "a", "mapping"],
            None,
        ],
    )
    def test_missing_links_yield_empty_string(self, body):
        assert extract_text(body) == ""


class TestGeminiClient:
    """Tests for GeminiClient.generate against a mocked httpx client."""

    @pytest.fixture
    def gemini(self, settings):
        return GeminiClient(settings)

    @pytest.mark.asyncio
    async def test_success_returns_body(self, gemini):
        body = gemini_body("A sleepy fox.")
        mock_client = create_mock_async_client(httpx.Response(200, json=body))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            result = await gemini.generate("Be gentle.", "fox")

        assert result == body

    @pytest.mark.asyncio
    async def test_correct_api_call(self, gemini):
        """Key goes in the query string and the payload in the JSON body."""
        mock_client = create_mock_async_client(httpx.Response(200, json=gemini_body("x")))

        with patch(
            "story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client
        ) as mock_cls:
            await gemini.generate("Be gentle.", "fox")

        mock_cls.assert_called_once_with(timeout=30.0)
        mock_client.post.assert_called_once()
        call_args = mock_client.post.call_args

        assert call_args[0][0] == GENERATE_URL
        assert call_args[1]["params"] == {"key": TEST_API_KEY}
        assert call_args[1]["json"] == build_payload("Be gentle.", "fox")

    @pytest.mark.asyncio
    async def test_model_and_timeout_come_from_settings(self):
        settings = Settings(
            gemini_api_key="k",
            gemini_model="gemini-2.5-flash",
            request_timeout=12.5,
        )
        mock_client = create_mock_async_client(httpx.Response(200, json={}))

        with patch(
            "story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client
        ) as mock_cls:
            await GeminiClient(settings).generate("x", "fox")

        mock_cls.assert_called_once_with(timeout=12.5)
        assert "models/gemini-2.5-flash:generateContent" in mock_client.post.call_args[0][0]

    @pytest.mark.asyncio
    async def test_non_2xx_passes_upstream_body_through(self, gemini):
        error_body = {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
        mock_client = create_mock_async_client(httpx.Response(400, json=error_body))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError) as exc_info:
                await gemini.generate("x", "fox")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == error_body

    @pytest.mark.asyncio
    async def test_non_2xx_with_text_body(self, gemini):
        mock_client = create_mock_async_client(httpx.Response(502, text="Bad Gateway from proxy"))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError) as exc_info:
                await gemini.generate("x", "fox")

        assert exc_info.value.status_code == 502
        assert exc_info.value.details == "Bad Gateway from proxy"

    @pytest.mark.asyncio
    async def test_network_error(self, gemini):
        mock_client = create_mock_async_client(side_effect=httpx.ConnectError("Connection refused"))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError) as exc_info:
                await gemini.generate("x", "fox")

        assert exc_info.value.status_code is None
        assert "Connection refused" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_timeout(self, gemini):
        mock_client = create_mock_async_client(side_effect=httpx.ReadTimeout("timed out"))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError) as exc_info:
                await gemini.generate("x", "fox")

        assert "Timed out after 30.0s" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_total_timeout_bounds_slow_response(self):
        """A response that keeps trickling in is cut off at the overall timeout."""
        settings = Settings(gemini_api_key="k", request_timeout=0.05)

        async def slow_post(*args, **kwargs):
            await asyncio.sleep(5)
            return httpx.Response(200, json=gemini_body("too late"))

        mock_client = create_mock_async_client(side_effect=slow_post)

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError) as exc_info:
                await GeminiClient(settings).generate("x", "fox")

        assert "Timed out after 0.05s" in exc_info.value.details
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_success_body(self, gemini):
        mock_client = create_mock_async_client(httpx.Response(200, text="<html>oops</html>"))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError) as exc_info:
                await gemini.generate("x", "fox")

        assert "non-JSON" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_single_attempt_only(self, gemini):
        """Failures are never retried."""
        mock_client = create_mock_async_client(httpx.Response(503, json={"error": "overloaded"}))

        with patch("story_proxy.api.services.gemini_client.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(UpstreamError):
                await gemini.generate("x", "fox")

        assert mock_client.post.call_count == 1
