"""SQLAlchemy models for the Civic Commons application."""

from .community import Community, CommunityMember, MemberRole
from .location import Coordinates, Location
from .user import User

__all__ = [
    "Community", "CommunityMember", "MemberRole",
    "Coordinates", "Location",
    "User",
]
