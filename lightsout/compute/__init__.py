"""
Compute - Query and suspend the instance lightsout runs on.

Two interchangeable strategies implement LifecycleClient:
- rest: metadata-server token + raw compute v1 REST calls (httpx)
- sdk: google-cloud-compute with Application Default Credentials
"""

from ..config import LightsoutConfig
from .base import LifecycleClient, LifecycleError, ResourceIdentity, ResourceStatus
from .rest import RestLifecycleClient

__all__ = [
    "LifecycleClient",
    "LifecycleError",
    "ResourceIdentity",
    "ResourceStatus",
    "RestLifecycleClient",
    "create_lifecycle_client",
]


def create_lifecycle_client(config: LightsoutConfig) -> LifecycleClient:
    """Build the lifecycle client strategy selected by the config."""
    identity = ResourceIdentity(
        project=config.gcp_project,
        zone=config.gcp_zone,
        instance=config.gcp_instance,
    )

    if config.client == "sdk":
        # Only pull in the SDK when it is actually selected
        from .sdk import SdkLifecycleClient

        return SdkLifecycleClient(identity, api_timeout=config.api_timeout)

    return RestLifecycleClient(
        identity,
        token_timeout=config.token_timeout,
        api_timeout=config.api_timeout,
    )
