"""
Server Runner - Runs the HTTP server and waits for a reason to stop.

Two things end the process: an OS termination signal, or the internal
shutdown signal closed after a suspend attempt. Whichever comes first
drives the same teardown: cancel the timer, stop accepting requests,
give in-flight requests a bounded grace period.
"""

import asyncio
import contextlib

import structlog
import uvicorn

from ..app import create_app
from ..config import LightsoutConfig
from ..context import ControllerContext, build_context
from ..lifecycle import SignalHandler

__all__ = ["serve"]

logger = structlog.get_logger(__name__)


class _Server(uvicorn.Server):
    """Uvicorn server that leaves signal handling to SignalHandler."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield

    def install_signal_handlers(self) -> None:
        pass


def _build_server(config: LightsoutConfig, context: ControllerContext) -> _Server:
    app = create_app(context)
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level="warning",
        access_log=False,  # LoggingMiddleware covers requests
        timeout_graceful_shutdown=max(1, int(config.shutdown_timeout)),
    )
    return _Server(uvicorn_config)


async def serve(
    config: LightsoutConfig,
    context: ControllerContext | None = None,
    signal_handler: SignalHandler | None = None,
) -> int:
    """Serve until shutdown, then tear down.

    Args:
        config: Loaded configuration
        context: Prebuilt controller context (built from config if None)
        signal_handler: OS signal handler (a fresh one if None)

    Returns:
        Exit code (0 for graceful shutdown)
    """
    if context is None:
        context = build_context(config)
    if signal_handler is None:
        signal_handler = SignalHandler()

    server = _build_server(config, context)
    signal_handler.setup()

    logger.info("http_server_starting", host=config.host, port=config.port)
    serve_task = asyncio.create_task(server.serve())
    internal = asyncio.create_task(context.shutdown.wait_async())
    external = asyncio.create_task(signal_handler.shutdown_event.wait())

    try:
        done, _ = await asyncio.wait(
            {serve_task, internal, external},
            return_when=asyncio.FIRST_COMPLETED,
        )
        if internal in done:
            logger.info("internal_shutdown_triggered")
        elif external in done:
            logger.info("termination_signal_shutdown")
        else:
            logger.error("http_server_exited_unexpectedly")

        logger.info("gracefully_shutting_down")
        context.stop()
        server.should_exit = True

        finished, _ = await asyncio.wait({serve_task}, timeout=config.shutdown_timeout + 1)
        if not finished:
            logger.warning("forcing_http_server_exit", grace_seconds=config.shutdown_timeout)
            server.force_exit = True

        try:
            await serve_task
        except Exception as e:
            logger.error("server_shutdown_error", error=str(e))
    finally:
        for task in (internal, external):
            task.cancel()
        signal_handler.teardown()

    logger.info("lightsout_shutdown_complete")
    return 0
