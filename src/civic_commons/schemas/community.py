"""Community and membership Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from civic_commons.models.community import MemberRole

from .location import CoordinatesIn, LocationData


class CommunityCreate(BaseModel):
    """Schema for creating a new community.

    ``location_id`` may reference an existing location. When it does not
    resolve, ``location_data`` (and optionally ``coordinates``) is used to
    create one.
    """

    name: str
    description: str
    location_id: str | None = None
    location_data: LocationData | None = None
    coordinates: CoordinatesIn | None = None


class CommunityUpdate(BaseModel):
    """Partial update of a community's descriptive fields."""

    name: str | None = None
    description: str | None = None


class MemberUser(BaseModel):
    """User summary embedded in member listings."""

    id: str
    name: str | None
    image: str | None

    model_config = ConfigDict(from_attributes=True)


class MemberView(BaseModel):
    """A membership row as returned by the API."""

    id: str
    community_id: str
    user_id: str
    role: MemberRole
    joined_at: datetime
    user: MemberUser | None = None

    model_config = ConfigDict(from_attributes=True)


class CommunityView(BaseModel):
    """A community as seen by one (possibly anonymous) viewer."""

    id: str
    name: str
    description: str
    location_id: str | None
    location_name: str
    member_count: int
    is_admin: bool
    is_member: bool
    created_at: datetime
    distance_km: float | None = None


class CommunityDetail(CommunityView):
    """Community view plus its member list."""

    members: list[MemberView] = Field(default_factory=list)


class PromoteRequest(BaseModel):
    """Body of a promotion request."""

    member_id: str = Field(..., min_length=1)


class LeaveResult(BaseModel):
    """Outcome of leaving or being removed from a community."""

    success: bool = True
    community_deleted: bool = False
    promoted_member_id: str | None = None
