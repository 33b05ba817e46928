"""Pydantic models for API responses."""

from typing import Any

from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Liveness probe payload."""

    status: str
    message: str


class StoryResponse(BaseModel):
    """Generated story text. May be empty if the model returned no candidates."""

    text: str


class ErrorResponse(BaseModel):
    """Validation error body."""

    error: str


class UpstreamErrorResponse(BaseModel):
    """Upstream failure body, with the upstream's error passed through."""

    error: str
    details: Any = None
