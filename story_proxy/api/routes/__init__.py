"""API routes."""

from .health import router as health_router
from .transcript import router as transcript_router

__all__ = ["health_router", "transcript_router"]
