"""
SDK Lifecycle Client - Compute Engine API through google-cloud-compute.

Credentials come from Application Default Credentials (metadata server,
GOOGLE_APPLICATION_CREDENTIALS, gcloud login), so this strategy also
works off-instance.
"""

from typing import Any

from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import compute_v1

from .base import LifecycleClient, LifecycleError, ResourceIdentity, ResourceStatus

__all__ = ["SdkLifecycleClient"]


class SdkLifecycleClient(LifecycleClient):
    """Lifecycle client backed by compute_v1.InstancesClient.

    The SDK client is created lazily on first use so that missing
    credentials surface as a 'credentials' LifecycleError at suspend
    time rather than failing startup. SDK retries are disabled; the next
    timer cycle is the retry.
    """

    def __init__(
        self,
        identity: ResourceIdentity,
        api_timeout: float = 30.0,
        instances_client: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(identity, **kwargs)
        self.api_timeout = api_timeout
        self._instances = instances_client

    def _instances_client(self) -> Any:
        if self._instances is None:
            try:
                self._instances = compute_v1.InstancesClient()
            except auth_exceptions.GoogleAuthError as e:
                raise LifecycleError("credentials", f"no default credentials: {e}") from e
        return self._instances

    def _call(self, step: str, method_name: str) -> Any:
        client = self._instances_client()
        method = getattr(client, method_name)
        try:
            return method(
                project=self.identity.project,
                zone=self.identity.zone,
                instance=self.identity.instance,
                retry=None,
                timeout=self.api_timeout,
            )
        except auth_exceptions.GoogleAuthError as e:
            raise LifecycleError("credentials", f"credential refresh failed: {e}") from e
        except api_exceptions.GoogleAPICallError as e:
            code = e.code if isinstance(e.code, int) else None
            raise LifecycleError(step, e.message or str(e), code) from e
        except api_exceptions.GoogleAPIError as e:
            raise LifecycleError(step, str(e)) from e

    def status(self) -> ResourceStatus:
        """Fetch the instance and read its status."""
        instance = self._call("status", "get")
        return ResourceStatus.parse(getattr(instance, "status", None))

    def _request_suspend(self) -> None:
        # The returned operation is not awaited, matching the REST strategy
        self._call("suspend", "suspend")
