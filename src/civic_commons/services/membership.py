"""Community membership lifecycle.

Owns every state transition between a user and a community: creating a
community, joining, leaving, removal by an admin, promotion and demotion,
plus the cascade effects when the last admin or the last member leaves.

Invariant kept by every public method: a community that exists and has
members always has at least one ADMIN, and a community with no members does
not exist. Each method runs in a single transaction and, when it reads
membership state, takes the per-community lock first (see
``CommunityRepository.lock``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from civic_commons.core.settings import settings
from civic_commons.db.time import utcnow
from civic_commons.models import Community, CommunityMember, Coordinates, Location, MemberRole
from civic_commons.repositories.community_repo import CommunityRepository
from civic_commons.schemas.community import (
    CommunityDetail,
    CommunityView,
    LeaveResult,
    MemberView,
)
from civic_commons.schemas.location import CoordinatesIn, LocationData
from civic_commons.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from civic_commons.services.geo import haversine_km

logger = logging.getLogger(__name__)

COMMUNITY_NOT_FOUND = "Community not found"


class MembershipService:
    """Service handling community membership and its invariants."""

    def __init__(self, db: Session, repository: CommunityRepository | None = None) -> None:
        self.db = db
        self.communities = repository or CommunityRepository(db)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Commit on success; roll back and re-raise on any failure."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    def create_community(
        self,
        name: str,
        description: str,
        creator_id: str,
        location_id: str | None = None,
        location_data: LocationData | None = None,
        coordinates: CoordinatesIn | None = None,
    ) -> CommunityView:
        """Create a community with ``creator_id`` as its sole admin.

        Raises:
            ValidationError: name or description is blank.
            NotFoundError: the location does not resolve and no inline
                location payload was supplied.
        """
        name = (name or "").strip()
        description = (description or "").strip()
        if not name or not description:
            raise ValidationError("Name and description are required")

        with self._transaction():
            location = self._resolve_location(location_id, location_data, coordinates)
            community = Community(
                name=name,
                description=description,
                location=location,
                membership_version=0,
            )
            community.members.append(
                CommunityMember(
                    user_id=creator_id,
                    role=MemberRole.ADMIN,
                    joined_at=utcnow(),
                )
            )
            self.db.add(community)
            self.db.flush()
            community_id = community.id

        logger.info("Community %s created by user %s", community_id, creator_id)
        return self._view(self._reload(community_id), creator_id)

    def join_community(self, community_id: str, user_id: str) -> CommunityView:
        """Add ``user_id`` to the community as a MEMBER.

        Raises:
            NotFoundError: the community does not exist.
            ConflictError: the user already belongs to the community.
        """
        with self._transaction():
            community = self._lock(community_id)
            if self._find_member(community, user_id) is not None:
                raise ConflictError("You are already a member of this community")
            community.members.append(
                CommunityMember(
                    user_id=user_id,
                    role=MemberRole.MEMBER,
                    joined_at=utcnow(),
                )
            )
            self.db.flush()

        logger.debug("User %s joined community %s", user_id, community_id)
        return self._view(self._reload(community_id), user_id)

    def leave_community(self, community_id: str, user_id: str) -> LeaveResult:
        """Remove ``user_id`` from the community on their own initiative.

        A sole admin leaving hands the role to the oldest remaining member;
        if nobody remains the community itself is deleted.

        Raises:
            NotFoundError: the community or the membership does not exist.
        """
        with self._transaction():
            community = self._lock(community_id)
            member = self._find_member(community, user_id)
            if member is None:
                raise NotFoundError("You are not a member of this community")
            result = self._depart(community, member)
        return result

    def remove_member(
        self,
        community_id: str,
        acting_user_id: str,
        target_user_id: str,
    ) -> LeaveResult:
        """Remove ``target_user_id`` from the community.

        Self-removal is a leave and gets succession and dissolution. An admin
        removing someone else never triggers succession: removing the last
        admin that way is refused.

        Raises:
            AuthorizationError: the actor is neither an admin nor the target.
            NotFoundError: the community or the target membership is missing.
            ConflictError: the target is the last admin.
        """
        if acting_user_id == target_user_id:
            return self.leave_community(community_id, acting_user_id)

        with self._transaction():
            community = self._lock(community_id)
            self._require_admin(community, acting_user_id, "Only admins can remove other members")
            target = self._find_member(community, target_user_id)
            if target is None:
                raise NotFoundError("Member not found in this community")
            if target.is_admin and self.communities.count_admins(community.id) == 1:
                raise ConflictError("Cannot remove the last admin")
            community.members.remove(target)
            self.db.flush()

        logger.info(
            "User %s removed user %s from community %s",
            acting_user_id,
            target_user_id,
            community_id,
        )
        return LeaveResult()

    def promote_member(
        self,
        community_id: str,
        acting_user_id: str,
        target_member_id: str,
    ) -> MemberView:
        """Grant the ADMIN role to a MEMBER.

        Raises:
            AuthorizationError: the actor is not an admin.
            NotFoundError: the community or the target member is missing.
            ConflictError: the target is already an admin.
        """
        with self._transaction():
            community = self._lock(community_id)
            self._require_admin(community, acting_user_id, "Only admins can promote members")
            target = self._member_by_id(community, target_member_id)
            if target.is_admin:
                raise ConflictError("Member is already an admin")
            target.role = MemberRole.ADMIN
            self.db.flush()
            view = MemberView.model_validate(target)

        logger.info("Member %s promoted to admin in community %s", target_member_id, community_id)
        return view

    def demote_member(
        self,
        community_id: str,
        acting_user_id: str,
        target_member_id: str,
    ) -> MemberView:
        """Return an ADMIN to the MEMBER role.

        Raises:
            AuthorizationError: the actor is not an admin.
            NotFoundError: the community or the target member is missing.
            ConflictError: the target is not an admin, is the actor, or is
                the last admin.
        """
        with self._transaction():
            community = self._lock(community_id)
            self._require_admin(community, acting_user_id, "Only admins can demote other admins")
            target = self._member_by_id(community, target_member_id)
            if not target.is_admin:
                raise ConflictError("Member is not an admin")
            if target.user_id == acting_user_id:
                raise ConflictError("You cannot demote yourself")
            if self.communities.count_admins(community.id) <= 1:
                raise ConflictError("Cannot demote the last admin")
            target.role = MemberRole.MEMBER
            self.db.flush()
            view = MemberView.model_validate(target)

        logger.info("Member %s demoted in community %s", target_member_id, community_id)
        return view

    # ------------------------------------------------------------------
    # Community management and queries
    # ------------------------------------------------------------------

    def update_community(
        self,
        community_id: str,
        acting_user_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> CommunityDetail:
        """Change name and/or description. Blank values keep the current ones."""
        with self._transaction():
            community = self._lock(community_id)
            self._require_admin(community, acting_user_id, "Only admins can update the community")
            community.name = (name or "").strip() or community.name
            community.description = (description or "").strip() or community.description
            community.updated_at = utcnow()
            self.db.flush()

        return self._detail(self._reload(community_id), acting_user_id)

    def delete_community(self, community_id: str, acting_user_id: str) -> None:
        """Delete the community and every membership in it. Admins only."""
        with self._transaction():
            community = self._lock(community_id)
            self._require_admin(community, acting_user_id, "Only admins can delete the community")
            self.db.delete(community)
            self.db.flush()
        logger.info("Community %s deleted by user %s", community_id, acting_user_id)

    def get_community(self, community_id: str, viewer_id: str | None = None) -> CommunityDetail:
        community = self.communities.get(community_id)
        if community is None:
            raise NotFoundError(COMMUNITY_NOT_FOUND)
        return self._detail(community, viewer_id)

    def list_communities(
        self,
        viewer_id: str | None = None,
        location_id: str | None = None,
    ) -> list[CommunityView]:
        return [
            self._view(community, viewer_id)
            for community in self.communities.list_all(location_id=location_id)
        ]

    def list_members(self, community_id: str) -> list[MemberView]:
        community = self.communities.get(community_id)
        if community is None:
            raise NotFoundError(COMMUNITY_NOT_FOUND)
        return [MemberView.model_validate(member) for member in community.members]

    def nearby_communities(
        self,
        latitude: float | None,
        longitude: float | None,
        radius_km: float | None = None,
        viewer_id: str | None = None,
    ) -> list[CommunityView]:
        """Return communities within ``radius_km`` of a point, nearest first.

        Communities whose location has no coordinates are never returned.
        """
        if latitude is None or longitude is None:
            raise ValidationError("Latitude and longitude are required")
        if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
            raise ValidationError("Latitude or longitude out of range")
        radius = settings.nearby_default_radius_km if radius_km is None else radius_km
        if radius <= 0:
            raise ValidationError("Radius must be positive")

        nearby: list[CommunityView] = []
        for community in self.communities.list_all():
            coords = community.location.coordinates if community.location else None
            if coords is None:
                continue
            distance = haversine_km(latitude, longitude, coords.latitude, coords.longitude)
            if distance <= radius:
                nearby.append(self._view(community, viewer_id, distance_km=distance))
        nearby.sort(key=lambda view: view.distance_km or 0.0)
        return nearby

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _depart(self, community: Community, member: CommunityMember) -> LeaveResult:
        promoted_member_id: str | None = None
        if member.is_admin and self.communities.count_admins(community.id) == 1:
            successors = self.communities.members_by_tenure(
                community.id, exclude_user_id=member.user_id
            )
            if not successors:
                self.db.delete(community)
                self.db.flush()
                logger.info(
                    "Community %s dissolved: last member %s left",
                    community.id,
                    member.user_id,
                )
                return LeaveResult(community_deleted=True)
            heir = successors[0]
            heir.role = MemberRole.ADMIN
            promoted_member_id = heir.id
            logger.info(
                "Member %s succeeded user %s as admin of community %s",
                heir.id,
                member.user_id,
                community.id,
            )

        community.members.remove(member)
        self.db.flush()
        logger.debug("User %s left community %s", member.user_id, community.id)
        return LeaveResult(promoted_member_id=promoted_member_id)

    def _lock(self, community_id: str) -> Community:
        community = self.communities.lock(community_id)
        if community is None:
            raise NotFoundError(COMMUNITY_NOT_FOUND)
        return community

    def _reload(self, community_id: str) -> Community:
        community = self.communities.get(community_id, fresh=True)
        if community is None:
            raise NotFoundError(COMMUNITY_NOT_FOUND)
        return community

    @staticmethod
    def _find_member(community: Community, user_id: str | None) -> CommunityMember | None:
        if user_id is None:
            return None
        for member in community.members:
            if member.user_id == user_id:
                return member
        return None

    @staticmethod
    def _member_by_id(community: Community, member_id: str) -> CommunityMember:
        for member in community.members:
            if member.id == member_id:
                return member
        raise NotFoundError("Member not found")

    def _role_of(self, community: Community, user_id: str | None) -> MemberRole | None:
        member = self._find_member(community, user_id)
        return member.role if member is not None else None

    def _require_admin(self, community: Community, user_id: str, message: str) -> None:
        if self._role_of(community, user_id) != MemberRole.ADMIN:
            raise AuthorizationError(message)

    def _resolve_location(
        self,
        location_id: str | None,
        location_data: LocationData | None,
        coordinates: CoordinatesIn | None,
    ) -> Location:
        location = self.communities.get_location(location_id) if location_id else None
        if location is None and location_data is not None:
            coords = coordinates or CoordinatesIn()
            location = Location(
                city=location_data.city or "Unknown",
                state=location_data.state or "",
                country=location_data.country or "Unknown",
                address=location_data.address or "",
                coordinates=Coordinates(latitude=coords.latitude, longitude=coords.longitude),
            )
            if location_id:
                location.id = location_id
            self.db.add(location)
        if location is None:
            raise NotFoundError("Location not found")
        return location

    def _view(
        self,
        community: Community,
        viewer_id: str | None,
        distance_km: float | None = None,
    ) -> CommunityView:
        role = self._role_of(community, viewer_id)
        return CommunityView(
            id=community.id,
            name=community.name,
            description=community.description,
            location_id=community.location_id,
            location_name=community.location.display_name if community.location else "",
            member_count=len(community.members),
            is_admin=role == MemberRole.ADMIN,
            is_member=role is not None,
            created_at=community.created_at,
            distance_km=distance_km,
        )

    def _detail(self, community: Community, viewer_id: str | None) -> CommunityDetail:
        view = self._view(community, viewer_id)
        return CommunityDetail(
            **view.model_dump(),
            members=[MemberView.model_validate(member) for member in community.members],
        )
