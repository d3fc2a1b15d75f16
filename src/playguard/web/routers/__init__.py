from playguard.web.routers.players import router as players_router
from playguard.web.routers.sessions import router as sessions_router

__all__ = [
    "players_router",
    "sessions_router",
]
