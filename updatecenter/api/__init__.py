"""API exports."""

from .artifacts import router as artifacts_router
from .routes import router as health_router

__all__ = ["artifacts_router", "health_router"]
