"""SQLAlchemy models for communities and their membership."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from civic_commons.db.session import Base
from civic_commons.db.time import new_id, utcnow

from .location import Location
from .user import User


class MemberRole(str, enum.Enum):
    """Closed set of roles a member can hold inside one community."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Community(Base):
    """A named group of users scoped to a location."""

    __tablename__ = "community"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("location.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    # Bumped by every membership write; the UPDATE doubles as the community lock.
    membership_version: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    location: Mapped[Location | None] = relationship("Location")
    members: Mapped[list[CommunityMember]] = relationship(
        "CommunityMember",
        back_populates="community",
        cascade="all, delete-orphan",
        order_by="CommunityMember.joined_at",
    )


class CommunityMember(Base):
    """Relation record joining one user to one community with a role."""

    __tablename__ = "community_member"
    __table_args__ = (
        UniqueConstraint("community_id", "user_id", name="uq_community_member_user"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    community_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("community.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, name="member_role", native_enum=False, length=16),
        nullable=False,
        default=MemberRole.MEMBER,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    community: Mapped[Community] = relationship("Community", back_populates="members")
    user: Mapped[User] = relationship("User")

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN
