from talingchan.api.cards import router as cards_router
from talingchan.api.exports import router as exports_router
from talingchan.api.health import router as health_router
from talingchan.api.sessions import router as sessions_router

__all__ = [
    "cards_router",
    "exports_router",
    "health_router",
    "sessions_router",
]
