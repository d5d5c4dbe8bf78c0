"""End-to-end timing scenarios with real timers.

These run the actual ShutdownTimer with short timeouts against the
recording lifecycle client, so each one takes a few seconds.
"""

import time
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from .doubles import RecordingLifecycleClient

pytestmark = pytest.mark.slow

TIMEOUT = 2
# Scheduling jitter allowance on loaded machines
SLACK = 0.3


class FreshProbe:
    """Fallback probe whose activity stays a fixed age until switched off."""

    def __init__(self, age: float = 0.5) -> None:
        self.age = age
        self.active = True

    def last_activity(self):
        if not self.active:
            return None, False
        return datetime.now(timezone.utc) - timedelta(seconds=self.age), True


@pytest.fixture
def fast_config(config):
    return replace(config, inactivity_timeout=TIMEOUT)


def sleep_until(start: float, offset: float) -> None:
    remaining = start + offset - time.monotonic()
    if remaining > 0:
        time.sleep(remaining)


class TestInactivityScenarios:
    """Timer, decision and client wired together."""

    def test_no_signals_suspends_after_timeout(self, make_context, fast_config):
        """No pings: suspend fires one timeout after start."""
        client = RecordingLifecycleClient()
        context = make_context(fast_config, client=client)

        start = time.monotonic()
        context.start()

        assert client.invoked.wait(TIMEOUT + 2)
        elapsed = client.invocations[0] - start
        assert TIMEOUT <= elapsed <= TIMEOUT + 0.2 + SLACK
        assert context.shutdown.wait(1)
        assert client.suspend_requests == 1

    def test_signal_pushes_expiry_back(self, make_context, fast_config):
        """A ping at 1.5s moves the suspend to 3.5s."""
        client = RecordingLifecycleClient()
        context = make_context(fast_config, client=client)

        start = time.monotonic()
        context.start()
        sleep_until(start, 1.5)
        context.record_ping()

        assert not client.invoked.wait(start + 3.5 - time.monotonic() - 0.05)
        assert client.invoked.wait(2)
        elapsed = client.invocations[0] - start
        assert 3.5 <= elapsed <= 3.7 + SLACK

    def test_repeated_signals_never_suspend(self, make_context, fast_config):
        """Five pings a second apart hold the instance up throughout."""
        client = RecordingLifecycleClient()
        context = make_context(fast_config, client=client)

        start = time.monotonic()
        context.start()
        for i in range(1, 6):
            sleep_until(start, i)
            context.record_ping()
            assert client.invocations == []

        last_ping = time.monotonic()
        assert client.invoked.wait(TIMEOUT + 2)
        elapsed = client.invocations[0] - last_ping
        assert TIMEOUT - 0.05 <= elapsed <= TIMEOUT + SLACK

    def test_keep_online_never_suspends(self, make_context, fast_config):
        """Keep-online disables the timer entirely, pings included."""
        client = RecordingLifecycleClient()
        context = make_context(replace(fast_config, inactivity_timeout=1, keep_online=True), client=client)

        context.start()
        context.record_ping()

        assert not client.invoked.wait(3)
        assert context.timer.armed is False
        assert context.shutdown.closed is False

    def test_fresh_fallback_defers_suspension(self, make_context, fast_config):
        """Recent fallback activity keeps the instance up until it goes stale."""
        client = RecordingLifecycleClient()
        probe = FreshProbe(age=0.5)
        context = make_context(fast_config, client=client, probe=probe)

        context.start()

        assert not client.invoked.wait(5)
        assert context.timer.armed is True
        assert context.shutdown.closed is False

        probe.active = False
        assert client.invoked.wait(TIMEOUT + 2)
        assert context.shutdown.wait(1)

    def test_shutdown_signal_closes_once(self, make_context, fast_config):
        """A second expiry after shutdown does not close the latch again."""
        client = RecordingLifecycleClient()
        context = make_context(fast_config, client=client)

        context.start()
        assert context.shutdown.wait(TIMEOUT + 2)

        assert context.decision.run() is True
        assert context.shutdown.close() is False
