"""API router factory functions."""
from .sessions import create_sessions_router
from .systems import create_systems_router
from .telegram import create_telegram_router

__all__ = [
    "create_sessions_router",
    "create_systems_router",
    "create_telegram_router",
]
