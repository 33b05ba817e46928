"""Liveness probe."""

from fastapi import APIRouter

from ..models import StatusResponse

router = APIRouter(tags=["Health"])


@router.get("/", response_model=StatusResponse)
async def health_check() -> StatusResponse:
    """Health check endpoint."""
    return StatusResponse(status="ok", message="Gemini proxy server is running")
