"""API configuration.

Single source of truth for settings used across the API layer. Settings are
read from the environment once at startup and passed to the app; request
handlers never read the environment themselves.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

# Defaults
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 30.0  # seconds, applied to every upstream call

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Immutable process-wide configuration."""

    gemini_api_key: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    gemini_model: str = DEFAULT_MODEL
    gemini_api_base: str = DEFAULT_API_BASE
    request_timeout: float = DEFAULT_TIMEOUT
    verbose_logging: bool = False
    json_logs: bool = True

    @property
    def generate_url(self) -> str:
        """Gemini generateContent endpoint for the configured model."""
        return f"{self.gemini_api_base.rstrip('/')}/models/{self.gemini_model}:generateContent"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Load settings from environment variables.

        Raises:
            ConfigurationError: If GEMINI_API_KEY is missing or a numeric
                value cannot be parsed
        """
        env = os.environ if environ is None else environ

        api_key = env.get("GEMINI_API_KEY", "")
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set in environment variables!")

        return cls(
            gemini_api_key=api_key,
            host=env.get("HOST") or DEFAULT_HOST,
            port=_parse_port(env.get("PORT")),
            gemini_model=env.get("GEMINI_MODEL") or DEFAULT_MODEL,
            gemini_api_base=env.get("GEMINI_API_BASE") or DEFAULT_API_BASE,
            request_timeout=_parse_timeout(env.get("GEMINI_TIMEOUT")),
            verbose_logging=(env.get("VERBOSE_LOGGING", "").strip().lower() in _TRUTHY),
            json_logs=(env.get("LOG_FORMAT", "json").strip().lower() != "text"),
        )


def _parse_port(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {raw!r}")
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT out of range: {port}")
    return port


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"GEMINI_TIMEOUT must be a number of seconds, got {raw!r}")
    if timeout <= 0:
        raise ConfigurationError("GEMINI_TIMEOUT must be positive")
    return timeout
