"""Gemini generateContent client.

One POST per story request with an explicit timeout and no retries, plus the
lenient extraction of the generated text from the response body.
"""

import asyncio
import logging
from typing import Any

import httpx

from ..config import Settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)

# Fixed generation parameters sent with every request
GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 2000,
    "topP": 0.9,
    "topK": 40,
    "frequencyPenalty": 0.2,
    "presencePenalty": 0.15,
}


def build_payload(system_instruction: str, animal: str) -> dict:
    """Build the generateContent request body."""
    return {
        "system_instruction": {
            "parts": [{"text": system_instruction}],
        },
        "contents": [
            {
                "role": "user",
                "parts": [{"text": animal or "animal"}],
            },
        ],
        "generationConfig": dict(GENERATION_CONFIG),
    }


def extract_text(body: Any) -> str:
    """
    Extract the first candidate's first text part from a Gemini response.

    Any missing link in candidates[0].content.parts[0].text yields an
    empty string rather than an error. The text is returned unmodified.
    """
    if not isinstance(body, dict):
        return ""

    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        return ""

    content = candidate.get("content")
    if not isinstance(content, dict):
        return ""

    parts = content.get("parts")
    if not isinstance(parts, list) or not parts:
        return ""

    part = parts[0]
    if not isinstance(part, dict):
        return ""

    text = part.get("text")
    return text if isinstance(text, str) else ""


def _error_details(response: httpx.Response) -> Any:
    """Upstream error body as JSON if possible, else raw text, else the reason."""
    try:
        return response.json()
    except ValueError:
        return response.text or response.reason_phrase


class GeminiClient:
    """Async client for the configured Gemini model."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def endpoint(self) -> str:
        return self.settings.generate_url

    async def generate(self, system_instruction: str, animal: str) -> dict:
        """
        Send one generateContent request.

        Args:
            system_instruction: The built storyteller instruction
            animal: The user's animal, sent as the single user turn

        Returns:
            The decoded JSON response body

        Raises:
            UpstreamError: On transport failure, timeout, non-2xx status or
                a response body that is not JSON
        """
        payload = build_payload(system_instruction, animal)

        try:
            async with httpx.AsyncClient(timeout=self.settings.request_timeout) as client:
                # httpx bounds each phase; wait_for bounds the whole exchange
                response = await asyncio.wait_for(
                    client.post(
                        self.endpoint,
                        params={"key": self.settings.gemini_api_key},
                        json=payload,
                    ),
                    timeout=self.settings.request_timeout,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise UpstreamError(
                f"Timed out after {self.settings.request_timeout}s: {e}"
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(f"Failed to connect to Gemini API: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                f"Gemini API returned status {response.status_code}",
                status_code=response.status_code,
                details=_error_details(response),
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Gemini API returned a non-JSON body: {e}",
                status_code=response.status_code,
            ) from e

        logger.debug("Gemini API response received successfully")
        return body
