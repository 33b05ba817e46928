"""FastAPI application for the bedtime story proxy."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import Settings
from .errors import MissingParameterError
from .logging import proxy_logger
from .routes import health_router, transcript_router

logger = logging.getLogger(__name__)


async def missing_parameter_handler(request: Request, exc: MissingParameterError) -> JSONResponse:
    """Report a missing required field as 400 with a fixed error body."""
    proxy_logger.validation_failed(exc.message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


def create_app(settings: Settings) -> FastAPI:
    """
    Build the application around already-loaded settings.

    The settings are attached to app.state and reach handlers through
    dependencies, so tests can build an app without touching the environment.
    """
    app = FastAPI(
        title="Bedtime Story Proxy",
        description="""
Generate soothing bedtime stories with Gemini.

## Workflow
1. POST `/transcript` with at least an `animal`
2. Optional fields (`animal_name`, `moral`, `setting`, `repeating_phrase`) fall back to defaults
3. Read the story from the `text` field of the response
        """,
        version="0.1.0",
    )
    app.state.settings = settings

    app.add_exception_handler(MissingParameterError, missing_parameter_handler)

    app.include_router(health_router)
    app.include_router(transcript_router, tags=["Stories"])

    logger.info(
        f"Configured for model {settings.gemini_model}",
        extra={"model": settings.gemini_model},
    )
    return app
