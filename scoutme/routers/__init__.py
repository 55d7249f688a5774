"""
ScoutMe API Routers
===================

All API routers for the ScoutMe API.
"""

from scoutme.routers.health import router as health_router
from scoutme.routers.users import router as users_router
from scoutme.routers.matches import router as matches_router
from scoutme.routers.clubs import router as clubs_router
from scoutme.routers.player_profiles import router as player_profiles_router

__all__ = [
    "health_router",
    "users_router",
    "matches_router",
    "clubs_router",
    "player_profiles_router",
]
