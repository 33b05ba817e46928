"""Exceptions raised by the proxy and the fixed labels sent to clients."""

from typing import Any, Optional

MISSING_ANIMAL_MESSAGE = "Missing required parameter: animal"
UPSTREAM_FAILURE_LABEL = "Gemini request failed"


class ConfigurationError(ValueError):
    """Required configuration is missing or invalid. Fatal at startup."""


class MissingParameterError(ValueError):
    """A required request field is missing or empty."""

    def __init__(self, message: str = MISSING_ANIMAL_MESSAGE):
        super().__init__(message)
        self.message = message


class UpstreamError(Exception):
    """The Gemini call failed.

    Attributes:
        status_code: Upstream HTTP status, or None for transport errors
        details: Upstream error body when available, else the error message
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = message if details is None else details
