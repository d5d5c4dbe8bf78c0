"""
Activity Tracker - Records when the last liveness signal arrived.

Every ping updates the tracker; the inactivity decision reads it when
the shutdown timer fires.
"""

import threading
from datetime import datetime, timezone

__all__ = ["ActivityTracker"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityTracker:
    """Thread-safe record of the most recent liveness signal.

    The stored timestamp never moves backwards, even if the wall clock
    is stepped back between two signals.

    Example:
        tracker = ActivityTracker()
        tracker.record_signal()
        tracker.last_signal_at()  # -> aware UTC datetime
    """

    def __init__(self, clock=_utcnow) -> None:
        self._clock = clock
        # Plain mutex for readers too; a read is a single attribute copy
        self._lock = threading.Lock()
        self._last_signal_at: datetime = clock()
        self._signal_count = 0

    def record_signal(self) -> None:
        """Record a liveness signal at the current time."""
        now = self._clock()
        with self._lock:
            if now > self._last_signal_at:
                self._last_signal_at = now
            self._signal_count += 1

    def last_signal_at(self) -> datetime:
        """Timestamp of the most recent signal (creation time if none)."""
        with self._lock:
            return self._last_signal_at

    @property
    def signal_count(self) -> int:
        """Number of signals recorded since creation."""
        with self._lock:
            return self._signal_count

    def snapshot(self) -> tuple[datetime, int]:
        """Consistent (last_signal_at, signal_count) pair."""
        with self._lock:
            return self._last_signal_at, self._signal_count
