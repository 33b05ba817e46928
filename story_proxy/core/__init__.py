"""Core story logic, independent of the HTTP layer."""

from .prompts import STORY_DEFAULTS, build_from_request, build_system_instruction

__all__ = ["STORY_DEFAULTS", "build_from_request", "build_system_instruction"]
