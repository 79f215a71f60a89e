"""Community and membership endpoints for the Civic Commons API."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from civic_commons.api.v1.dependencies import (
    CurrentUserDep,
    MembershipServiceDep,
    OptionalUserDep,
)
from civic_commons.schemas.community import (
    CommunityCreate,
    CommunityDetail,
    CommunityUpdate,
    CommunityView,
    LeaveResult,
    MemberView,
    PromoteRequest,
)

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=list[CommunityView])
def list_communities(
    service: MembershipServiceDep,
    viewer: OptionalUserDep,
    location_id: str | None = None,
) -> list[CommunityView]:
    """List communities, optionally filtered by location."""
    return service.list_communities(
        viewer_id=viewer.id if viewer else None,
        location_id=location_id,
    )


@router.get("/nearby", response_model=list[CommunityView])
def nearby_communities(
    service: MembershipServiceDep,
    viewer: OptionalUserDep,
    lat: float | None = None,
    lng: float | None = None,
    radius: float | None = Query(default=None, description="Search radius in km"),
) -> list[CommunityView]:
    """List communities near a point, nearest first."""
    return service.nearby_communities(
        lat,
        lng,
        radius_km=radius,
        viewer_id=viewer.id if viewer else None,
    )


@router.post("/", response_model=CommunityView, status_code=status.HTTP_201_CREATED)
def create_community(
    payload: CommunityCreate,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> CommunityView:
    """Create a community; the caller becomes its first admin."""
    return service.create_community(
        payload.name,
        payload.description,
        current_user.id,
        location_id=payload.location_id,
        location_data=payload.location_data,
        coordinates=payload.coordinates,
    )


@router.get("/{community_id}", response_model=CommunityDetail)
def get_community(
    community_id: str,
    service: MembershipServiceDep,
    viewer: OptionalUserDep,
) -> CommunityDetail:
    """Get a specific community with its members."""
    return service.get_community(community_id, viewer_id=viewer.id if viewer else None)


@router.patch("/{community_id}", response_model=CommunityDetail)
def update_community(
    community_id: str,
    payload: CommunityUpdate,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> CommunityDetail:
    """Update a community's name or description (admins only)."""
    return service.update_community(
        community_id,
        current_user.id,
        name=payload.name,
        description=payload.description,
    )


@router.delete(
    "/{community_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_community(
    community_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> Response:
    """Delete a community and all its memberships (admins only)."""
    service.delete_community(community_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{community_id}/members", response_model=list[MemberView])
def list_members(community_id: str, service: MembershipServiceDep) -> list[MemberView]:
    return service.list_members(community_id)


@router.post(
    "/{community_id}/members",
    response_model=CommunityView,
    status_code=status.HTTP_201_CREATED,
)
def join_community(
    community_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> CommunityView:
    """Join a community."""
    return service.join_community(community_id, current_user.id)


@router.delete("/{community_id}/members", response_model=LeaveResult)
def leave_community(
    community_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> LeaveResult:
    """Leave a community."""
    return service.leave_community(community_id, current_user.id)


@router.delete("/{community_id}/members/{user_id}", response_model=LeaveResult)
def remove_member(
    community_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> LeaveResult:
    """Remove a member. Admins may remove anyone; members only themselves."""
    return service.remove_member(community_id, current_user.id, user_id)


@router.post("/{community_id}/admins", response_model=MemberView)
def promote_member(
    community_id: str,
    payload: PromoteRequest,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> MemberView:
    """Promote a member to admin."""
    return service.promote_member(community_id, current_user.id, payload.member_id)


@router.delete("/{community_id}/admins/{member_id}", response_model=MemberView)
def demote_member(
    community_id: str,
    member_id: str,
    current_user: CurrentUserDep,
    service: MembershipServiceDep,
) -> MemberView:
    """Demote an admin back to member."""
    return service.demote_member(community_id, current_user.id, member_id)
