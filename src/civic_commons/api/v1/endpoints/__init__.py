"""API endpoint modules for version 1."""

from .communities import router as communities_router
from .locations import router as locations_router
from .users import router as users_router

__all__ = [
    "communities_router",
    "locations_router",
    "users_router",
]
