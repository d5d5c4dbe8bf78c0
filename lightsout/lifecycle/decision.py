"""
Inactivity Decision - What to do when the shutdown timer expires.

Either the fallback probe shows recent activity and the timer is
rearmed, or the instance is suspended (when configured) and the
shutdown signal is closed. The routine never raises.
"""

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from ..compute import LifecycleClient, LifecycleError
from ..probes import ActivityProbe
from .activity import ActivityTracker
from .shutdown import ShutdownSignal
from .timer import ShutdownTimer

__all__ = ["InactivityDecision"]

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InactivityDecision:
    """Transition function run once per timer expiry.

    States: ARMED -> DECIDING -> STAYING_UP (back to ARMED) or
    SHUTTING_DOWN (terminal, whatever the suspend outcome).
    """

    def __init__(
        self,
        tracker: ActivityTracker,
        timer: ShutdownTimer,
        probe: ActivityProbe,
        client: LifecycleClient,
        shutdown: ShutdownSignal,
        timeout_seconds: float,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.tracker = tracker
        self.timer = timer
        self.probe = probe
        self.client = client
        self.shutdown = shutdown
        self.timeout_seconds = timeout_seconds
        self._clock = clock

    def _fallback_active(self, now: datetime) -> bool:
        try:
            last, found = self.probe.last_activity()
        except Exception as e:
            logger.warning("fallback_probe_failed", error=str(e))
            return False

        if not found or last is None:
            return False

        age = (now - last).total_seconds()
        if age < 0:
            # Clock skew or a misdated line; it says nothing about recent work
            logger.warning("fallback_activity_in_future", fallback_age_seconds=int(age))
            return False
        if age < self.timeout_seconds:
            logger.info("staying_online_for_fallback_activity", fallback_age_seconds=int(age))
            return True
        return False

    def run(self) -> bool:
        """Decide between staying up and shutting down.

        Returns:
            True if the shutdown signal was closed, False if rearmed
        """
        last_signal = self.tracker.last_signal_at()
        now = self._clock()

        if self._fallback_active(now):
            self.timer.rearm()
            return False

        logger.info(
            "proceeding_with_shutdown",
            ping_age_seconds=int((now - last_signal).total_seconds()),
        )

        if not self.client.configured:
            identity = self.client.identity
            logger.warning(
                "missing_instance_configuration_cannot_suspend",
                project=identity.project,
                zone=identity.zone,
                instance=identity.instance,
            )
        else:
            self._suspend()

        self.shutdown.close()
        return True

    def _suspend(self) -> None:
        try:
            status = self.client.suspend()
        except LifecycleError as e:
            logger.error(
                "suspend_failed",
                step=e.step,
                status_code=e.status_code,
                error=str(e),
            )
        except Exception as e:
            logger.exception("suspend_failed", error=str(e))
        else:
            logger.info("suspend_request_completed", status=status.value)
