"""Data access helpers for communities and their members."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from civic_commons.models.community import Community, CommunityMember, MemberRole
from civic_commons.models.location import Location

__all__ = ["CommunityRepository"]


def _with_members_and_location() -> tuple[Any, ...]:
    return (
        selectinload(Community.members).selectinload(CommunityMember.user),
        selectinload(Community.location).selectinload(Location.coordinates),
    )


class CommunityRepository:
    """Thin wrapper around database access for community entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(self, community_id: str, *, fresh: bool = False) -> Community | None:
        """Return a community with its members and location loaded.

        ``fresh`` overwrites whatever the identity map already holds.
        """
        result = self.session.execute(
            select(Community)
            .where(Community.id == community_id)
            .options(*_with_members_and_location())
            .execution_options(populate_existing=fresh)
        )
        return result.scalars().first()

    def lock(self, community_id: str) -> Community | None:
        """Serialize membership writes on one community for the current transaction.

        The version bump is the first statement of the transaction: it takes a
        row lock on PostgreSQL and the write lock on SQLite, so a concurrent
        writer on the same community waits until this transaction ends. The
        community is then reloaded so its member collection reflects committed
        state rather than whatever the identity map held before the lock.
        """
        result = self.session.execute(
            update(Community)
            .where(Community.id == community_id)
            .values(membership_version=Community.membership_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        reloaded = self.session.execute(
            select(Community)
            .where(Community.id == community_id)
            .options(*_with_members_and_location())
            .execution_options(populate_existing=True)
        )
        return reloaded.scalars().one()

    def list_all(self, location_id: str | None = None) -> list[Community]:
        """Return communities, optionally restricted to one location."""
        stmt = select(Community).options(*_with_members_and_location())
        if location_id:
            stmt = stmt.where(Community.location_id == location_id)
        stmt = stmt.order_by(Community.created_at, Community.id)
        return list(self.session.execute(stmt).scalars())

    def count_admins(self, community_id: str) -> int:
        """Count members holding the ADMIN role, including pending changes."""
        self.session.flush()
        count = self.session.scalar(
            select(func.count())
            .select_from(CommunityMember)
            .where(
                CommunityMember.community_id == community_id,
                CommunityMember.role == MemberRole.ADMIN,
            )
        )
        return int(count or 0)

    def members_by_tenure(
        self,
        community_id: str,
        exclude_user_id: str | None = None,
    ) -> list[CommunityMember]:
        """Return members ordered oldest membership first."""
        self.session.flush()
        stmt = select(CommunityMember).where(CommunityMember.community_id == community_id)
        if exclude_user_id is not None:
            stmt = stmt.where(CommunityMember.user_id != exclude_user_id)
        stmt = stmt.order_by(CommunityMember.joined_at.asc(), CommunityMember.id.asc())
        return list(self.session.execute(stmt).scalars())

    def get_location(self, location_id: str) -> Location | None:
        """Return a location by identifier."""
        return self.session.get(Location, location_id)
