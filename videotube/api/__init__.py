"""API routes."""

from videotube.api.router import api_router

__all__ = ["api_router"]
