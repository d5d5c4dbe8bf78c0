"""
Signal Handling - Graceful shutdown on SIGTERM/SIGINT.

Integrates with the asyncio event loop running the HTTP server. The
first signal requests a graceful shutdown, a second one forces exit.
"""

import asyncio
import signal

import structlog

__all__ = ["SignalHandler"]

logger = structlog.get_logger(__name__)


class SignalHandler:
    """Turns OS termination signals into an asyncio event.

    Example:
        handler = SignalHandler()
        handler.setup()
        await handler.shutdown_event.wait()
    """

    SIGNALS = (signal.SIGTERM, signal.SIGINT)

    def __init__(self) -> None:
        self._shutdown_event: asyncio.Event | None = None
        self._signals_received: list[signal.Signals] = []

    @property
    def shutdown_event(self) -> asyncio.Event:
        """Event that's set when a termination signal is received."""
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        return self._shutdown_event

    @property
    def should_shutdown(self) -> bool:
        """Check if shutdown has been requested."""
        return self._shutdown_event is not None and self._shutdown_event.is_set()

    def setup(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Register signal handlers with the event loop.

        Args:
            loop: Event loop to use (defaults to running loop)
        """
        if loop is None:
            loop = asyncio.get_running_loop()

        for sig in self.SIGNALS:
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
            except (RuntimeError, NotImplementedError, ValueError):
                # Only possible from the main thread on Unix
                logger.debug("signal_handler_skipped", signal=sig.name)
                return

        logger.debug("signal_handlers_registered", signals=[s.name for s in self.SIGNALS])

    def teardown(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Remove the handlers installed by setup()."""
        if loop is None:
            loop = asyncio.get_running_loop()

        for sig in self.SIGNALS:
            try:
                loop.remove_signal_handler(sig)
            except (RuntimeError, NotImplementedError, ValueError):
                pass

    def _handle_signal(self, sig: signal.Signals) -> None:
        self._signals_received.append(sig)
        logger.info("shutdown_signal_received", signal=sig.name, count=len(self._signals_received))

        if len(self._signals_received) == 1:
            self.shutdown_event.set()
        else:
            logger.warning("forced_shutdown", signal=sig.name)
            raise SystemExit(128 + sig.value)
