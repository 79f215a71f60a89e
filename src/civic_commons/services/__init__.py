"""Service layer for Civic Commons."""

from .errors import (
    AuthorizationError,
    ConflictError,
    MembershipError,
    NotFoundError,
    ValidationError,
)
from .locations import LocationService
from .membership import MembershipService

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "LocationService",
    "MembershipError",
    "MembershipService",
    "NotFoundError",
    "ValidationError",
]
