"""Version 1 API endpoints."""

from .endpoints import communities_router, locations_router, users_router

__all__ = [
    "communities_router",
    "locations_router",
    "users_router",
]
