"""Pydantic models for API requests and responses."""

from .requests import StoryRequest
from .responses import (
    ErrorResponse,
    StatusResponse,
    StoryResponse,
    UpstreamErrorResponse,
)

__all__ = [
    "StoryRequest",
    "StatusResponse",
    "StoryResponse",
    "ErrorResponse",
    "UpstreamErrorResponse",
]
