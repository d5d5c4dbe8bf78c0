"""
Docker Log Probe - Treats recent container output as activity.

A co-located workload (by default the GitHub Actions runner) may be busy
even when nobody pings. Its last log line carries a time of day; if that
is recent enough the instance stays up.

The probe is best effort: a missing container, empty output, a timeout
or an unparseable line all mean "no activity found", never an error.
"""

import re
import subprocess
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol

import structlog

__all__ = ["ActivityProbe", "DockerLogProbe", "NullActivityProbe", "parse_log_timestamp"]

logger = structlog.get_logger(__name__)

# Optional ISO date, then HH:MM:SS at the start of the line
_TIMESTAMP_RE = re.compile(
    r"^\s*\[?(?:(?P<date>\d{4}-\d{2}-\d{2})[ T])?(?P<h>\d{2}):(?P<m>\d{2}):(?P<s>\d{2})"
)


class ActivityProbe(Protocol):
    """Secondary activity source."""

    def last_activity(self) -> tuple[datetime | None, bool]:
        """Return (timestamp, found). timestamp is None when not found."""
        ...


def parse_log_timestamp(line: str, now: datetime | None = None) -> datetime | None:
    """Parse the leading timestamp of a log line as UTC.

    Lines without a date are placed on the most recent day on which that
    time of day is not later than ``now``. A line written at 23:59:50
    and read at 00:00:30 is from yesterday.

    Args:
        line: Log line
        now: Reference time (aware UTC), defaults to the current time

    Returns:
        Aware datetime, or None if the line has no valid timestamp
    """
    match = _TIMESTAMP_RE.match(line)
    if not match:
        return None

    if now is None:
        now = datetime.now(timezone.utc)

    try:
        tod = time(int(match.group("h")), int(match.group("m")), int(match.group("s")))
        if match.group("date"):
            return datetime.combine(date.fromisoformat(match.group("date")), tod, tzinfo=timezone.utc)
    except ValueError:
        return None

    timestamp = datetime.combine(now.date(), tod, tzinfo=timezone.utc)
    if timestamp > now:
        timestamp -= timedelta(days=1)
    return timestamp


class NullActivityProbe:
    """Probe used when no fallback container is configured."""

    def last_activity(self) -> tuple[datetime | None, bool]:
        return None, False


class DockerLogProbe:
    """Reads the last log line of a container via ``docker logs``.

    Example:
        probe = DockerLogProbe("github-actions-runner", timeout=5.0)
        when, found = probe.last_activity()
    """

    def __init__(self, container: str, timeout: float = 5.0, docker: str = "docker") -> None:
        self.container = container
        self.timeout = timeout
        self.docker = docker

    def _last_line(self) -> str | None:
        try:
            result = subprocess.run(
                [self.docker, "logs", "--tail", "1", self.container],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("fallback_probe_unavailable", container=self.container, error=str(e))
            return None

        if result.returncode != 0:
            logger.debug(
                "fallback_probe_no_logs",
                container=self.container,
                returncode=result.returncode,
            )
            return None

        line = result.stdout.strip()
        if not line:
            return None
        return line.splitlines()[-1]

    def last_activity(self) -> tuple[datetime | None, bool]:
        """Timestamp of the container's last log line, if parseable."""
        line = self._last_line()
        if line is None:
            return None, False

        timestamp = parse_log_timestamp(line)
        if timestamp is None:
            logger.debug("fallback_probe_unparseable", container=self.container)
            return None, False
        return timestamp, True
