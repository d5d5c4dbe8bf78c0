"""
Middleware - Request logging and error handling.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

logger = structlog.get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code and duration.

    Health probes arrive every few seconds, so they are logged at debug.
    """

    QUIET_PATHS = {"/healthcheck"}

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.monotonic()

        response = await call_next(request)

        duration_ms = (time.monotonic() - start) * 1000
        log = logger.debug if request.url.path in self.QUIET_PATHS else logger.info
        log(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response


class ErrorMiddleware(BaseHTTPMiddleware):
    """Catches unhandled exceptions and answers with a plain 500."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "unhandled_error",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            return PlainTextResponse("Failed to write response", status_code=500)
