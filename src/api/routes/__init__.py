"""API route modules."""

from .auth import router as auth_router
from .calendar import router as calendar_router
from .health import router as health_router

__all__ = ["auth_router", "calendar_router", "health_router"]
