"""Randomised operation sequences must never leave a live community without an admin."""

from __future__ import annotations

import random

import pytest
from sqlalchemy import select

from civic_commons.models import Community, CommunityMember, MemberRole
from civic_commons.services.errors import MembershipError


def _assert_invariant(db_session) -> None:
    for community in db_session.execute(
        select(Community).execution_options(populate_existing=True)
    ).scalars():
        members = list(
            db_session.execute(
                select(CommunityMember).where(CommunityMember.community_id == community.id)
            ).scalars()
        )
        assert members, f"community {community.id} exists without members"
        assert any(m.role == MemberRole.ADMIN for m in members), (
            f"community {community.id} has members but no admin"
        )
        assert len({m.user_id for m in members}) == len(members)


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_random_sequences_keep_an_admin(seed, service, db_session, make_user, location) -> None:
    """Test that random operation sequences always leave an admin."""
    rng = random.Random(seed)
    users = [make_user() for _ in range(5)]
    community_ids = [
        service.create_community("One", "First", users[0].id, location_id=location.id).id,
        service.create_community("Two", "Second", users[1].id, location_id=location.id).id,
    ]

    for _ in range(150):
        community_id = rng.choice(community_ids)
        actor = rng.choice(users)
        target = rng.choice(users)
        members = list(
            db_session.execute(
                select(CommunityMember).where(CommunityMember.community_id == community_id)
            ).scalars()
        )
        member_id = rng.choice(members).id if members else "missing"
        operation = rng.choice(["join", "join", "leave", "remove", "promote", "demote"])
        try:
            if operation == "join":
                service.join_community(community_id, actor.id)
            elif operation == "leave":
                service.leave_community(community_id, actor.id)
            elif operation == "remove":
                service.remove_member(community_id, actor.id, target.id)
            elif operation == "promote":
                service.promote_member(community_id, actor.id, member_id)
            else:
                service.demote_member(community_id, actor.id, member_id)
        except MembershipError:
            pass
        _assert_invariant(db_session)
