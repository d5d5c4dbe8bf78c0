"""
Controller Context - Everything the process shares, built once.

The HTTP handlers and the timer callback receive this object instead of
reaching for module globals.
"""

import threading
from dataclasses import dataclass

import structlog

from .compute import LifecycleClient, create_lifecycle_client
from .config import LightsoutConfig
from .lifecycle import ActivityTracker, InactivityDecision, ShutdownSignal, ShutdownTimer
from .probes import ActivityProbe, create_activity_probe

__all__ = ["ControllerContext", "build_context"]

logger = structlog.get_logger(__name__)


@dataclass
class ControllerContext:
    """Wired-up controller components for one process."""

    config: LightsoutConfig
    tracker: ActivityTracker
    timer: ShutdownTimer
    shutdown: ShutdownSignal
    probe: ActivityProbe
    client: LifecycleClient
    decision: InactivityDecision

    def record_ping(self) -> None:
        """Record a liveness signal and push the expiry back."""
        self.tracker.record_signal()
        self.timer.rearm()

    def start(self) -> None:
        """Arm the timer unless the instance is kept online."""
        if self.config.keep_online:
            logger.info("keep_online_enabled_timer_disabled")
            return

        logger.info("starting_inactivity_timer", timeout_seconds=self.config.inactivity_timeout)
        self.timer.rearm()

    def stop(self) -> None:
        """Cancel any pending expiry. Called on teardown."""
        self.timer.cancel()


def build_context(
    config: LightsoutConfig,
    client: LifecycleClient | None = None,
    probe: ActivityProbe | None = None,
) -> ControllerContext:
    """Construct and wire all controller components.

    Args:
        config: Loaded configuration
        client: Lifecycle client override (defaults to the configured strategy)
        probe: Fallback probe override (defaults to the configured container)
    """
    lock = threading.Lock()
    tracker = ActivityTracker()
    shutdown = ShutdownSignal(lock)
    timer = ShutdownTimer(
        timeout_seconds=config.inactivity_timeout,
        enabled=not config.keep_online,
        lock=lock,
    )

    if client is None:
        client = create_lifecycle_client(config)
    if probe is None:
        probe = create_activity_probe(config)

    client.before_suspend = timer.rearm

    decision = InactivityDecision(
        tracker=tracker,
        timer=timer,
        probe=probe,
        client=client,
        shutdown=shutdown,
        timeout_seconds=config.inactivity_timeout,
    )
    timer.on_expire = decision.run

    return ControllerContext(
        config=config,
        tracker=tracker,
        timer=timer,
        shutdown=shutdown,
        probe=probe,
        client=client,
        decision=decision,
    )
