"""
Shutdown Timer - Owns the single pending inactivity check.

Each ping rearms the timer; when it fires without having been rearmed
the inactivity decision runs on the timer thread.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import structlog

__all__ = ["ShutdownTimer"]

logger = structlog.get_logger(__name__)


class ShutdownTimer:
    """Cancelable, rearmable single-shot timer.

    All start/stop/replace operations go through one lock, which is also
    handed to the ShutdownSignal so closing the latch is ordered with
    respect to rearms. At most one firing is ever pending.

    Example:
        timer = ShutdownTimer(timeout_seconds=90, on_expire=decision.run)
        timer.rearm()   # on startup and on every ping
        timer.cancel()  # on teardown
    """

    def __init__(
        self,
        timeout_seconds: float,
        on_expire: Callable[[], None] | None = None,
        enabled: bool = True,
        lock: threading.Lock | None = None,
    ) -> None:
        """Initialize the timer.

        Args:
            timeout_seconds: Delay between the last rearm and expiry
            on_expire: Called on the timer thread when the delay elapses
            enabled: False turns rearm() into a no-op (keep-online mode)
            lock: Lock shared with the shutdown signal
        """
        self.timeout_seconds = timeout_seconds
        self.on_expire = on_expire
        self.enabled = enabled
        self.lock = lock or threading.Lock()

        self._handle: threading.Timer | None = None
        self._cancelled = False
        self._generation = 0

    @property
    def armed(self) -> bool:
        """True while an expiry is pending."""
        with self.lock:
            return self._handle is not None

    def rearm(self) -> None:
        """Cancel any pending expiry and schedule a new one."""
        if not self.enabled:
            return

        with self.lock:
            if self._cancelled:
                return
            if self._handle is not None:
                self._handle.cancel()

            self._generation += 1
            handle = threading.Timer(self.timeout_seconds, self._fire, args=(self._generation,))
            handle.daemon = True
            self._handle = handle
            handle.start()

        logger.debug("shutdown_timer_reset", timeout_seconds=self.timeout_seconds)

    def cancel(self) -> None:
        """Stop the pending expiry for good. Safe to call repeatedly."""
        with self.lock:
            self._cancelled = True
            handle, self._handle = self._handle, None

        if handle is not None:
            handle.cancel()
            logger.debug("shutdown_timer_stopped")

    def _fire(self, generation: int) -> None:
        with self.lock:
            if self._handle is None or generation != self._generation:
                # Rearmed or cancelled after this thread woke up
                return
            self._handle = None

        logger.info(
            "inactivity_timeout_reached",
            timeout_seconds=self.timeout_seconds,
        )
        if self.on_expire:
            self.on_expire()
