"""API module."""

from godo.api.routes import router

__all__ = ["router"]
