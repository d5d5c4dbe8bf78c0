"""
Probes - Secondary activity sources consulted when the timer expires.
"""

from ..config import LightsoutConfig
from .docker_logs import ActivityProbe, DockerLogProbe, NullActivityProbe, parse_log_timestamp

__all__ = [
    "ActivityProbe",
    "DockerLogProbe",
    "NullActivityProbe",
    "create_activity_probe",
    "parse_log_timestamp",
]


def create_activity_probe(config: LightsoutConfig) -> ActivityProbe:
    """Probe for the configured fallback container, or a null probe."""
    if not config.fallback_container:
        return NullActivityProbe()
    return DockerLogProbe(config.fallback_container, timeout=config.fallback_timeout)
