"""Tests for ORM model behaviour."""

import pytest
from sqlalchemy.exc import IntegrityError

from civic_commons.models import CommunityMember, Location, MemberRole


def test_location_display_name_skips_empty_parts() -> None:
    """Test that empty location parts are left out of the display name."""
    assert Location(city="Lyon", state="", country="France").display_name == "Lyon, France"


def test_member_role_defaults_and_flag(db_session, community, other_user) -> None:
    """Test that new memberships default to the member role."""
    member = CommunityMember(user_id=other_user.id)
    community.members.append(member)
    db_session.commit()

    assert member.role == MemberRole.MEMBER
    assert member.is_admin is False
    assert member.joined_at is not None


def test_duplicate_membership_rejected_by_schema(db_session, community, test_user) -> None:
    """Test that the schema rejects duplicate memberships."""
    db_session.add(CommunityMember(community_id=community.id, user_id=test_user.id))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_deleting_community_deletes_members(db_session, community, other_user) -> None:
    """Test that deleting a community deletes its members."""
    community.members.append(CommunityMember(user_id=other_user.id))
    db_session.commit()
    community_id = community.id

    db_session.delete(community)
    db_session.commit()

    assert db_session.query(CommunityMember).filter_by(community_id=community_id).count() == 0
