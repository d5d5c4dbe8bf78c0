"""
Shutdown Signal - One-shot latch telling the main loop to exit.

Closed by the inactivity decision after a suspend attempt. Closing is
idempotent: the waiter is released once, later closes are no-ops.
"""

from __future__ import annotations

import asyncio
import threading

import structlog

__all__ = ["ShutdownSignal"]

logger = structlog.get_logger(__name__)


class ShutdownSignal:
    """Single-fire latch shared between the timer thread and the main loop.

    The close is guarded by the lock the shutdown timer uses, so a
    concurrent rearm and a close are totally ordered.

    Example:
        shutdown = ShutdownSignal(lock)

        # Timer thread
        shutdown.close()

        # Main loop
        await shutdown.wait_async()
    """

    def __init__(self, lock: threading.Lock | None = None) -> None:
        self._lock = lock or threading.Lock()
        self._closed = threading.Event()
        self._waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Event]] = []

    @property
    def closed(self) -> bool:
        """True once the latch has been closed."""
        return self._closed.is_set()

    def close(self) -> bool:
        """Close the latch.

        Returns:
            True if this call closed it, False if it was already closed
        """
        with self._lock:
            if self._closed.is_set():
                return False
            self._closed.set()
            waiters, self._waiters = self._waiters, []

        for loop, event in waiters:
            try:
                loop.call_soon_threadsafe(event.set)
            except RuntimeError:
                # Waiter's loop already closed
                pass

        logger.debug("shutdown_signal_closed")
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block the calling thread until closed or timeout."""
        return self._closed.wait(timeout)

    async def wait_async(self) -> None:
        """Wait on the running event loop until the latch is closed."""
        event = asyncio.Event()
        with self._lock:
            if self._closed.is_set():
                return
            self._waiters.append((asyncio.get_running_loop(), event))
        await event.wait()
