"""Concurrent writers on the same community must be serialised."""

from __future__ import annotations

import threading
from datetime import UTC, datetime

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from civic_commons.db.session import Base
from civic_commons.models import Community, CommunityMember, MemberRole, User
from civic_commons.schemas.community import LeaveResult
from civic_commons.services.membership import MembershipService


def test_two_admins_leaving_at_once_dissolve_cleanly(tmp_path) -> None:
    """Test concurrent leaves by both members never strand the community."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    with Session() as setup:
        first = User(email="first@example.org", name="First")
        second = User(email="second@example.org", name="Second")
        community = Community(name="Pair", description="Two admins", membership_version=0)
        community.members.extend(
            [
                CommunityMember(user=first, role=MemberRole.ADMIN, joined_at=datetime(2024, 1, 1, tzinfo=UTC)),
                CommunityMember(user=second, role=MemberRole.ADMIN, joined_at=datetime(2024, 1, 2, tzinfo=UTC)),
            ]
        )
        setup.add(community)
        setup.commit()
        community_id, user_ids = community.id, [first.id, second.id]

    barrier = threading.Barrier(len(user_ids))
    results: list[LeaveResult] = []
    failures: list[BaseException] = []
    lock = threading.Lock()

    def leave(user_id: str) -> None:
        with Session() as session:
            barrier.wait()
            try:
                result = MembershipService(session).leave_community(community_id, user_id)
            except BaseException as exc:  # pragma: no cover - surfaced by the assertion below
                with lock:
                    failures.append(exc)
                return
            with lock:
                results.append(result)

    threads = [threading.Thread(target=leave, args=(uid,)) for uid in user_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    try:
        assert failures == []
        assert sorted(r.community_deleted for r in results) == [False, True]
        with Session() as check:
            assert check.get(Community, community_id) is None
            remaining = check.execute(
                select(CommunityMember).where(CommunityMember.community_id == community_id)
            ).scalars().all()
            assert remaining == []
    finally:
        engine.dispose()
