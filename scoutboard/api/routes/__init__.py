"""API route modules."""

from scoutboard.api.routes.boards import router as boards_router
from scoutboard.api.routes.health import router as health_router
from scoutboard.api.routes.reminders import router as reminders_router

__all__ = [
    "health_router",
    "boards_router",
    "reminders_router",
]
