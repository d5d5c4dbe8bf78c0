"""
Application Factory - Creates and configures the FastAPI app.

Each call creates a fresh app bound to one ControllerContext. The
lifespan arms the inactivity timer on startup and cancels it on
shutdown.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from .. import __version__
from ..context import ControllerContext
from .middleware import ErrorMiddleware, LoggingMiddleware
from .routes import router

logger = structlog.get_logger(__name__)


def create_app(context: ControllerContext) -> FastAPI:
    """Create the FastAPI application.

    Args:
        context: Controller context shared with the timer thread

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context.start()
        yield
        context.stop()
        logger.info("http_server_stopped")

    app = FastAPI(
        title="lightsout",
        description="Suspends the instance after a period without pings",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Last added runs first
    app.add_middleware(ErrorMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(router)
    app.state.context = context

    return app
