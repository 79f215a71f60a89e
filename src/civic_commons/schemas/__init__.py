"""Pydantic schemas for request and response payloads."""

from .community import (
    CommunityCreate,
    CommunityDetail,
    CommunityUpdate,
    CommunityView,
    LeaveResult,
    MemberView,
    PromoteRequest,
)
from .location import (
    CoordinatesIn,
    CoordinatesView,
    LocationCreate,
    LocationData,
    LocationView,
)
from .user import RegisterRequest, RegisterResponse, UserResponse

__all__ = [
    "CommunityCreate",
    "CommunityDetail",
    "CommunityUpdate",
    "CommunityView",
    "LeaveResult",
    "MemberView",
    "PromoteRequest",
    "CoordinatesIn",
    "CoordinatesView",
    "LocationCreate",
    "LocationData",
    "LocationView",
    "RegisterRequest",
    "RegisterResponse",
    "UserResponse",
]
