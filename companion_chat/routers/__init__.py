"""Routers package for Companion Chat."""

from .auth import router as auth_router
from .messages import router as messages_router
from .preferences import router as preferences_router

__all__ = ["auth_router", "messages_router", "preferences_router"]
