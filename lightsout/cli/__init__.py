"""
CLI - Command line entry point and server runner.
"""

from .main import main
from .server import serve

__all__ = ["main", "serve"]
