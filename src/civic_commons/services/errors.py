"""Domain errors raised by the membership lifecycle manager.

Each error carries a ``kind`` the HTTP layer maps to a status code, and a
message specific enough to show to the user as-is.
"""

from __future__ import annotations


class MembershipError(Exception):
    """Base class for all domain failures of the community core."""

    kind = "membership_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MembershipError):
    """Malformed or missing input."""

    kind = "validation"


class NotFoundError(MembershipError):
    """Community, membership or location absent."""

    kind = "not_found"


class ConflictError(MembershipError):
    """Action conflicts with current membership state."""

    kind = "conflict"


class AuthorizationError(MembershipError):
    """Actor lacks the role required for the action."""

    kind = "authorization"


__all__ = [
    "MembershipError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthorizationError",
]
