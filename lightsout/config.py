"""
Centralized configuration for lightsout.

Configuration sources (priority order):
1. Command line flags (see lightsout.cli)
2. Environment variables
3. Default values

Environment variables:
- HOST: Bind address (default: 0.0.0.0)
- PORT: Port number (default: 8808)
- INACTIVITY_TIMEOUT: Seconds without a ping before suspending (default: 90)
- LIBOPS_KEEP_ONLINE: "yes" keeps the instance online forever
- LOG_LEVEL: Log level (default: INFO)
- SHUTDOWN_TIMEOUT: Grace period for in-flight requests (default: 10)
- GCP_PROJECT, GCP_ZONE, GCP_INSTANCE_NAME: Instance to suspend
- LIGHTSOUT_CLIENT: Compute API strategy, "rest" or "sdk" (default: rest)
- FALLBACK_CONTAINER: Container whose logs count as activity
  (default: github-actions-runner, empty disables)
- FALLBACK_TIMEOUT: Seconds to wait for the container logs (default: 5)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

__all__ = ["CLIENT_STRATEGIES", "ConfigError", "LightsoutConfig"]

CLIENT_STRATEGIES = ("rest", "sdk")

DEFAULT_INACTIVITY_TIMEOUT = 90


class ConfigError(Exception):
    """Raised when a setting is invalid and has no sensible default."""


def _get_env(environ: Mapping[str, str], key: str, default: str) -> str:
    """Get environment variable, treating empty values as unset."""
    return environ.get(key) or default


def _get_env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    """Get positive integer environment variable, falling back on bad input."""
    try:
        value = int(_get_env(environ, key, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


def _get_env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    """Get positive float environment variable, falling back on bad input."""
    try:
        value = float(_get_env(environ, key, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class LightsoutConfig:
    """Immutable controller configuration."""

    host: str = "0.0.0.0"
    port: int = 8808
    inactivity_timeout: float = DEFAULT_INACTIVITY_TIMEOUT
    keep_online: bool = False
    log_level: str = "INFO"
    shutdown_timeout: float = 10.0

    # Instance identity (all three required to suspend)
    gcp_project: str = ""
    gcp_zone: str = ""
    gcp_instance: str = ""

    client: str = "rest"

    # Secondary activity source
    fallback_container: str = "github-actions-runner"
    fallback_timeout: float = 5.0

    # Compute API timeouts
    token_timeout: float = 10.0
    api_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.inactivity_timeout <= 0:
            raise ConfigError(f"inactivity timeout must be positive, got {self.inactivity_timeout}")
        if self.client not in CLIENT_STRATEGIES:
            raise ConfigError(
                f"unknown lifecycle client '{self.client}', expected one of {', '.join(CLIENT_STRATEGIES)}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LightsoutConfig":
        """Load configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            host=_get_env(env, "HOST", "0.0.0.0"),
            port=_get_env_int(env, "PORT", 8808),
            inactivity_timeout=_get_env_int(env, "INACTIVITY_TIMEOUT", DEFAULT_INACTIVITY_TIMEOUT),
            keep_online=_get_env(env, "LIBOPS_KEEP_ONLINE", "") == "yes",
            log_level=_get_env(env, "LOG_LEVEL", "INFO").upper(),
            shutdown_timeout=_get_env_float(env, "SHUTDOWN_TIMEOUT", 10.0),
            gcp_project=_get_env(env, "GCP_PROJECT", ""),
            gcp_zone=_get_env(env, "GCP_ZONE", ""),
            gcp_instance=_get_env(env, "GCP_INSTANCE_NAME", ""),
            client=_get_env(env, "LIGHTSOUT_CLIENT", "rest").lower(),
            fallback_container=env.get("FALLBACK_CONTAINER", "github-actions-runner"),
            fallback_timeout=_get_env_float(env, "FALLBACK_TIMEOUT", 5.0),
        )

    def with_overrides(self, **overrides) -> "LightsoutConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    @property
    def has_instance_identity(self) -> bool:
        """True when project, zone and instance name are all set."""
        return bool(self.gcp_project and self.gcp_zone and self.gcp_instance)
