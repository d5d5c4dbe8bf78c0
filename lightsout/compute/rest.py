"""
REST Lifecycle Client - Compute Engine API over plain HTTP.

Fetches an access token from the instance metadata server and calls
the compute v1 REST API with it. No SDK required.
"""

from typing import Any

import httpx

from .base import LifecycleClient, LifecycleError, ResourceIdentity, ResourceStatus

__all__ = ["RestLifecycleClient", "METADATA_TOKEN_URL", "COMPUTE_API_URL"]

METADATA_TOKEN_URL = (
    "http://metadata.google.internal/computeMetadata/v1/instance/service-accounts/default/token"
)
COMPUTE_API_URL = "https://compute.googleapis.com/compute/v1"


class RestLifecycleClient(LifecycleClient):
    """Lifecycle client using the metadata token and raw REST calls.

    One token is fetched per suspend attempt and shared by the status
    fetch and the suspend call. A standalone status() fetches its own.

    Example:
        client = RestLifecycleClient(
            ResourceIdentity("my-project", "us-central1-f", "my-vm"),
        )
        client.suspend()
    """

    def __init__(
        self,
        identity: ResourceIdentity,
        token_timeout: float = 10.0,
        api_timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(identity, **kwargs)
        self.token_timeout = token_timeout
        self.api_timeout = api_timeout
        self._transport = transport
        self._attempt_token: str | None = None
        self._in_attempt = False

    @property
    def instance_url(self) -> str:
        return f"{COMPUTE_API_URL}/{self.identity.path}"

    def _client(self, timeout: float) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(timeout), transport=self._transport)

    def access_token(self) -> str:
        """Fetch an access token for the instance's default service account."""
        try:
            with self._client(self.token_timeout) as client:
                response = client.get(METADATA_TOKEN_URL, headers={"Metadata-Flavor": "Google"})
        except httpx.HTTPError as e:
            raise LifecycleError("credentials", f"token request failed: {e}") from e

        if response.status_code != 200:
            raise LifecycleError("credentials", "token request rejected", response.status_code)

        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise LifecycleError("credentials", f"malformed token response: {e}") from e

        if not token:
            raise LifecycleError("credentials", "empty access token")
        return token

    def _bearer_token(self) -> str:
        if not self._in_attempt:
            return self.access_token()
        if self._attempt_token is None:
            self._attempt_token = self.access_token()
        return self._attempt_token

    def suspend(self) -> ResourceStatus:
        """Suspend the instance, using a single token for the attempt."""
        self._in_attempt = True
        try:
            return super().suspend()
        finally:
            self._in_attempt = False
            self._attempt_token = None

    def _authorized(self, method: str, url: str, step: str) -> httpx.Response:
        token = self._bearer_token()

        try:
            with self._client(self.api_timeout) as client:
                response = client.request(
                    method, url, headers={"Authorization": f"Bearer {token}"}
                )
        except httpx.HTTPError as e:
            raise LifecycleError(step, f"{method} {url} failed: {e}") from e

        if response.status_code != 200:
            raise LifecycleError(step, f"{method} {url} returned non-200", response.status_code)
        return response

    def status(self) -> ResourceStatus:
        """GET the instance resource and read its status."""
        response = self._authorized("GET", self.instance_url, "status")
        try:
            return ResourceStatus.parse(response.json().get("status"))
        except (ValueError, AttributeError) as e:
            raise LifecycleError("status", f"malformed instance response: {e}") from e

    def _request_suspend(self) -> None:
        self._authorized("POST", f"{self.instance_url}/suspend", "suspend")
