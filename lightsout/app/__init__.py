"""
App - FastAPI application exposing /ping and /healthcheck.
"""

from .factory import create_app

__all__ = ["create_app"]
