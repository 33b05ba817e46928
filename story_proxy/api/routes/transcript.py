"""Bedtime story generation endpoint."""

import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ...core.prompts import build_from_request
from ..dependencies import AppSettings, Gemini, StoryBody
from ..errors import UPSTREAM_FAILURE_LABEL, MissingParameterError, UpstreamError
from ..logging import proxy_logger
from ..models import (
    ErrorResponse,
    StoryRequest,
    StoryResponse,
    UpstreamErrorResponse,
)
from ..services.gemini_client import extract_text

router = APIRouter()


@router.post(
    "/transcript",
    response_model=StoryResponse,
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": StoryRequest.model_json_schema()}},
        },
    },
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": UpstreamErrorResponse},
    },
)
async def create_transcript(
    request: StoryBody,
    settings: AppSettings,
    gemini: Gemini,
):
    """
    Generate a bedtime story transcript.

    Builds the storyteller instruction from the request (optional fields fall
    back to defaults), sends it to Gemini in a single attempt, and returns
    the first candidate's text. An empty or missing candidate list yields an
    empty string rather than an error.
    """
    proxy_logger.request_received(request.model_dump(exclude_none=True))

    if not request.animal:
        raise MissingParameterError()

    system_instruction = build_from_request(request)
    proxy_logger.upstream_started(settings.gemini_model, gemini.endpoint)

    started = time.monotonic()
    try:
        body = await gemini.generate(system_instruction, request.animal)
    except UpstreamError as e:
        proxy_logger.upstream_failed(e, status_code=e.status_code, details=e.details)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": UPSTREAM_FAILURE_LABEL, "details": e.details},
        )

    text = extract_text(body)
    proxy_logger.story_generated(len(text), time.monotonic() - started)

    return StoryResponse(text=text)
