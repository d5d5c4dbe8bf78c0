"""
Shared pytest fixtures for lightsout tests.
"""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from lightsout.app import create_app
from lightsout.config import LightsoutConfig
from lightsout.context import ControllerContext, build_context

from .doubles import RecordingLifecycleClient, StubProbe


# ============================================================================
# Configuration
# ============================================================================

@pytest.fixture
def config() -> LightsoutConfig:
    """Configuration with a complete identity and no fallback container."""
    return LightsoutConfig(
        host="127.0.0.1",
        port=18808,
        inactivity_timeout=60,
        gcp_project="proj",
        gcp_zone="zone-a",
        gcp_instance="vm-1",
        fallback_container="",
    )


@pytest.fixture
def lifecycle_client() -> RecordingLifecycleClient:
    return RecordingLifecycleClient()


@pytest.fixture
def probe() -> StubProbe:
    return StubProbe()


# ============================================================================
# Controller Context
# ============================================================================

@pytest.fixture
def make_context():
    """Factory building contexts that are stopped after the test."""
    built: list[ControllerContext] = []

    def _make(config: LightsoutConfig, client=None, probe=None) -> ControllerContext:
        context = build_context(
            config,
            client=client or RecordingLifecycleClient(),
            probe=probe or StubProbe(),
        )
        built.append(context)
        return context

    yield _make

    for context in built:
        context.stop()


@pytest.fixture
def context(make_context, config, lifecycle_client, probe) -> ControllerContext:
    return make_context(config, client=lifecycle_client, probe=probe)


# ============================================================================
# FastAPI Test Client
# ============================================================================

@pytest.fixture
def client(context) -> Iterator[TestClient]:
    """Synchronous test client; lifespan arms the timer."""
    with TestClient(create_app(context)) as c:
        yield c
