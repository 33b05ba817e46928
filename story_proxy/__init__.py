"""Bedtime story proxy: builds a storyteller prompt and relays it to Gemini."""

__version__ = "0.1.0"
