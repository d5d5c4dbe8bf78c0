"""
Lifecycle - The inactivity state machine and process shutdown.

Handles:
- Activity tracking (last ping timestamp and count)
- The single rearmable shutdown timer
- The decision run when the timer expires
- The one-shot shutdown signal and OS signal handling

Example:
    from lightsout.lifecycle import ActivityTracker, ShutdownSignal, ShutdownTimer

    lock = threading.Lock()
    shutdown = ShutdownSignal(lock)
    timer = ShutdownTimer(90, on_expire=decide, lock=lock)
    timer.rearm()
"""

from .activity import ActivityTracker
from .decision import InactivityDecision
from .shutdown import ShutdownSignal
from .signals import SignalHandler
from .timer import ShutdownTimer

__all__ = [
    "ActivityTracker",
    "InactivityDecision",
    "ShutdownSignal",
    "ShutdownTimer",
    "SignalHandler",
]
