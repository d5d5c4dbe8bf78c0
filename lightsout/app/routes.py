"""
Routes - Liveness and health endpoints.

Both handlers are plain ``def`` functions, so FastAPI runs them on its
worker thread pool and concurrent pings really do race on the tracker
and timer locks.
"""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.get("/ping", response_class=PlainTextResponse)
def ping(request: Request) -> PlainTextResponse:
    """Record activity and reset the inactivity timer."""
    context = request.app.state.context
    context.record_ping()

    logger.info(
        "ping_received",
        remote_addr=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        timer_reset=context.timer.enabled,
    )
    return PlainTextResponse("pong")


@router.get("/healthcheck")
def healthcheck() -> Response:
    """Container health probe. Never touches the inactivity state."""
    return Response(status_code=200, media_type="text/plain")
