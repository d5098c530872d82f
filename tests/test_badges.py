"""
Tests for the badge register
"""

from sqlalchemy import select

from cleanhood.models import Badge
from cleanhood.services.badge_service import BadgeService, get_user_badges


async def badge_id(session_factory, name):
    async with session_factory() as session:
        return await session.scalar(select(Badge.id).where(Badge.name == name))


class TestBadges:

    async def test_catalog_is_seeded(self, session_factory):
        async with session_factory() as session:
            names = set((await session.execute(select(Badge.name))).scalars().all())
        assert names == {"beginner_recycler", "plastic_free_pioneer", "compost_champion", "waste_warrior"}

    async def test_grant_then_duplicate(self, call, make_user, session_factory, ledger_state):
        user_id = await make_user()
        badge = await badge_id(session_factory, "compost_champion")

        first = await call(BadgeService, "grant_badge", user_id, badge)
        second = await call(BadgeService, "grant_badge", user_id, badge)

        assert first.success
        assert second.error_code == "BADGE_ALREADY_GRANTED"
        async with session_factory() as session:
            held = await get_user_badges(session, user_id)
        assert [item.badge.name for item in held] == ["compost_champion"]
        assert await ledger_state(user_id) == (0, 0, 0)

    async def test_revoke_is_idempotent(self, call, make_user, session_factory):
        user_id = await make_user()
        badge = await badge_id(session_factory, "waste_warrior")
        await call(BadgeService, "grant_badge", user_id, badge)

        assert (await call(BadgeService, "revoke_badge", user_id, badge)).success
        assert (await call(BadgeService, "revoke_badge", user_id, badge)).success
        async with session_factory() as session:
            assert await get_user_badges(session, user_id) == []

    async def test_unknown_badge_or_user(self, call, make_user, session_factory):
        user_id = await make_user()
        badge = await badge_id(session_factory, "beginner_recycler")

        assert (await call(BadgeService, "grant_badge", user_id, 999)).error_code == "NOT_FOUND"
        assert (await call(BadgeService, "grant_badge", 999, badge)).error_code == "NOT_FOUND"
