"""API version 1."""

from medboard.api.v1.router import api_router

__all__ = ["api_router"]
