"""Tests for the google-cloud-compute lifecycle client."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions

from lightsout.compute import LifecycleError, ResourceIdentity, ResourceStatus, create_lifecycle_client
from lightsout.compute.sdk import SdkLifecycleClient
from lightsout.config import LightsoutConfig

IDENTITY = ResourceIdentity("proj", "us-central1-f", "vm-1")


def make_client(status: str = "RUNNING") -> tuple[SdkLifecycleClient, MagicMock]:
    instances = MagicMock()
    instances.get.return_value = SimpleNamespace(status=status)
    return SdkLifecycleClient(IDENTITY, instances_client=instances), instances


class TestSdkSuspend:
    """Same effects and error taxonomy as the REST strategy."""

    def test_suspends_running_instance(self):
        client, instances = make_client()

        result = client.suspend()

        assert result is ResourceStatus.RUNNING
        instances.suspend.assert_called_once_with(
            project="proj", zone="us-central1-f", instance="vm-1", retry=None, timeout=30.0
        )

    def test_skips_when_not_running(self):
        client, instances = make_client(status="STOPPED")

        assert client.suspend() is ResourceStatus.STOPPED
        instances.suspend.assert_not_called()

    def test_before_suspend_hook_runs_first(self):
        client, instances = make_client()
        calls = []
        client.before_suspend = lambda: calls.append(instances.get.call_count)

        client.suspend()

        assert calls == [0]

    def test_status_api_error(self):
        client, instances = make_client()
        instances.get.side_effect = api_exceptions.NotFound("instance vm-1 not found")

        with pytest.raises(LifecycleError) as exc_info:
            client.suspend()

        assert exc_info.value.step == "status"
        assert exc_info.value.status_code == 404

    def test_suspend_api_error(self):
        client, instances = make_client()
        instances.suspend.side_effect = api_exceptions.Forbidden("no permission")

        with pytest.raises(LifecycleError) as exc_info:
            client.suspend()

        assert exc_info.value.step == "suspend"
        assert exc_info.value.status_code == 403

    def test_credential_refresh_failure(self):
        client, instances = make_client()
        instances.get.side_effect = auth_exceptions.RefreshError("token expired")

        with pytest.raises(LifecycleError) as exc_info:
            client.suspend()

        assert exc_info.value.step == "credentials"

    def test_missing_default_credentials(self):
        client = SdkLifecycleClient(IDENTITY)

        with patch(
            "lightsout.compute.sdk.compute_v1.InstancesClient",
            side_effect=auth_exceptions.DefaultCredentialsError("no ADC"),
        ):
            with pytest.raises(LifecycleError) as exc_info:
                client.status()

        assert exc_info.value.step == "credentials"


class TestSdkFactory:
    def test_factory_selects_sdk(self):
        client = create_lifecycle_client(
            LightsoutConfig(client="sdk", gcp_project="p", gcp_zone="z", gcp_instance="i")
        )

        assert isinstance(client, SdkLifecycleClient)
        assert client.configured is True
