"""API v1 routes."""

from .bot import router as bot_router
from .positions import router as positions_router

__all__ = ["bot_router", "positions_router"]
