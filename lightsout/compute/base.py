"""
Lifecycle Client - Contract for querying and suspending the instance.

Concrete strategies only implement the two remote calls; the suspend
procedure (rearm first, check status, suspend only when running) lives
here so every strategy has the same external effects.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

__all__ = [
    "LifecycleClient",
    "LifecycleError",
    "ResourceIdentity",
    "ResourceStatus",
]

logger = structlog.get_logger(__name__)


class ResourceStatus(Enum):
    """Compute Engine instance states."""

    PROVISIONING = "PROVISIONING"
    STAGING = "STAGING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"
    SUSPENDING = "SUSPENDING"
    SUSPENDED = "SUSPENDED"
    REPAIRING = "REPAIRING"
    TERMINATED = "TERMINATED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "ResourceStatus":
        """Map an API status string to a member, UNKNOWN if unrecognized."""
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_running(self) -> bool:
        return self is ResourceStatus.RUNNING


@dataclass(frozen=True)
class ResourceIdentity:
    """Which instance to act on."""

    project: str = ""
    zone: str = ""
    instance: str = ""

    @property
    def complete(self) -> bool:
        """True when every field is set."""
        return bool(self.project and self.zone and self.instance)

    @property
    def path(self) -> str:
        """Resource path relative to the compute v1 API root."""
        return f"projects/{self.project}/zones/{self.zone}/instances/{self.instance}"


class LifecycleError(Exception):
    """Raised when a suspend attempt fails.

    Attributes:
        step: Which part failed: 'credentials', 'status' or 'suspend'
        reason: Human readable detail
        status_code: HTTP status returned by the API, if any
    """

    def __init__(self, step: str, reason: str, status_code: int | None = None):
        self.step = step
        self.reason = reason
        self.status_code = status_code
        message = f"{step} failed: {reason}"
        if status_code is not None:
            message += f" (status {status_code})"
        super().__init__(message)


class LifecycleClient(ABC):
    """Base class for compute lifecycle strategies.

    Subclasses implement status() and _request_suspend(). Both raise
    LifecycleError on any failure.

    Example:
        client = RestLifecycleClient(identity)
        client.before_suspend = timer.rearm
        client.suspend()
    """

    def __init__(
        self,
        identity: ResourceIdentity,
        before_suspend: Callable[[], None] | None = None,
    ) -> None:
        self.identity = identity
        self.before_suspend = before_suspend

    @property
    def configured(self) -> bool:
        """True when the identity is complete enough to act on."""
        return self.identity.complete

    @abstractmethod
    def status(self) -> ResourceStatus:
        """Fetch the current instance status."""

    @abstractmethod
    def _request_suspend(self) -> None:
        """Issue the suspend action."""

    def suspend(self) -> ResourceStatus:
        """Suspend the instance if it is running.

        The before_suspend hook runs first, so the shutdown timer is
        freshly armed when the instance later wakes up.

        Returns:
            The status observed before acting

        Raises:
            LifecycleError: If credentials, the status fetch or the
                suspend call fail
        """
        if self.before_suspend:
            self.before_suspend()

        logger.info(
            "checking_instance_status",
            project=self.identity.project,
            zone=self.identity.zone,
            instance=self.identity.instance,
        )
        status = self.status()

        if status.is_running:
            logger.info("suspending_instance", instance=self.identity.instance)
            self._request_suspend()
        else:
            logger.info("instance_not_running_skipping_suspend", status=status.value)

        return status
