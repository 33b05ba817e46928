"""Services for calling the upstream story model."""

from .gemini_client import GENERATION_CONFIG, GeminiClient, build_payload, extract_text

__all__ = ["GENERATION_CONFIG", "GeminiClient", "build_payload", "extract_text"]
