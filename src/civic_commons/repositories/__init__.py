"""Data access helpers."""

from .community_repo import CommunityRepository
from .location_repo import LocationRepository

__all__ = ["CommunityRepository", "LocationRepository"]
