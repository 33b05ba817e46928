"""FastAPI dependency injection for settings, the Gemini client and the story body."""

import json
from typing import Annotated

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from .config import Settings
from .models import StoryRequest
from .services.gemini_client import GeminiClient


def get_settings(request: Request) -> Settings:
    """Get the settings loaded at startup and attached to the app."""
    return request.app.state.settings


def get_gemini_client(
    settings: Annotated[Settings, Depends(get_settings)]
) -> GeminiClient:
    """Get a GeminiClient bound to the app's settings."""
    return GeminiClient(settings)


def _is_json_content_type(content_type: str) -> bool:
    mime = content_type.split(";")[0].strip().lower()
    return mime == "application/json" or mime.endswith("+json")


async def get_story_request(request: Request) -> StoryRequest:
    """Parse the /transcript body into a StoryRequest.

    A missing body, a non-JSON content type, malformed JSON or a JSON value
    that is not an object all parse as an empty request, so the handler
    reports the missing animal as a 400. Wrong field types still raise a
    422 validation error.
    """
    payload = {}
    body = await request.body()
    if body and _is_json_content_type(request.headers.get("content-type", "")):
        try:
            data = json.loads(body)
        except ValueError:
            data = None
        if isinstance(data, dict):
            payload = data

    try:
        return StoryRequest.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False), body=payload)


# Type aliases for cleaner route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Gemini = Annotated[GeminiClient, Depends(get_gemini_client)]
StoryBody = Annotated[StoryRequest, Depends(get_story_request)]
