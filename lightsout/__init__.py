"""
lightsout - Suspends the compute instance it runs on after inactivity.

Exposes a liveness endpoint, tracks when it was last called, and asks the
cloud API to suspend the instance once the inactivity window elapses.
"""

__version__ = "1.0.0"

from .config import LightsoutConfig

__all__ = [
    "__version__",
    "LightsoutConfig",
]
