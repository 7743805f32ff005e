"""Unit tests for the profile visibility gate."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from factories import create_follow, create_user
from wanderlust.db.enums import ProfileVisibility
from wanderlust.social.follow_service import list_followers
from wanderlust.social.visibility import can_view_profile, visible_in_feed


class TestCanViewProfile:
    @pytest.mark.asyncio
    async def test_public_visible_to_anonymous(self, db_session: AsyncSession):
        target = await create_user(db_session, visibility=ProfileVisibility.PUBLIC)
        assert await can_view_profile(db_session, target, None)

    @pytest.mark.asyncio
    async def test_missing_visibility_means_public(self, db_session: AsyncSession):
        target = await create_user(db_session, visibility=None)
        assert await can_view_profile(db_session, target, None)

    @pytest.mark.asyncio
    async def test_private_only_owner(self, db_session: AsyncSession):
        target = await create_user(db_session, visibility=ProfileVisibility.PRIVATE)
        follower = await create_user(db_session)
        await create_follow(db_session, follower, target)

        assert await can_view_profile(db_session, target, target)
        assert not await can_view_profile(db_session, target, follower)
        assert not await can_view_profile(db_session, target, None)

    @pytest.mark.asyncio
    async def test_friends_requires_viewer_follows_target(self, db_session: AsyncSession):
        a = await create_user(db_session, visibility=ProfileVisibility.FRIENDS)
        b = await create_user(db_session)

        assert not await can_view_profile(db_session, a, b)
        assert not await can_view_profile(db_session, a, None)

        # A following B does not open A's profile to B
        await create_follow(db_session, a, b)
        assert not await can_view_profile(db_session, a, b)

        await create_follow(db_session, b, a)
        assert await can_view_profile(db_session, a, b)

    @pytest.mark.asyncio
    async def test_friends_owner_listing_unaffected_by_follow_back(self, db_session: AsyncSession):
        a = await create_user(db_session, visibility=ProfileVisibility.FRIENDS)
        b = await create_user(db_session)
        await create_follow(db_session, b, a)

        before = await list_followers(db_session, a.id, a)
        await create_follow(db_session, a, b)
        after = await list_followers(db_session, a.id, a)

        assert [e.user.id for e in before.items] == [b.id]
        assert [e.user.id for e in after.items] == [b.id]
        assert before.items[0].is_following is False
        assert after.items[0].is_following is True


class TestVisibleInFeed:
    @pytest.mark.asyncio
    async def test_only_private_is_excluded(self, db_session: AsyncSession):
        public = await create_user(db_session, visibility=ProfileVisibility.PUBLIC)
        friends = await create_user(db_session, visibility=ProfileVisibility.FRIENDS)
        private = await create_user(db_session, visibility=ProfileVisibility.PRIVATE)
        assert visible_in_feed(public)
        assert visible_in_feed(friends)
        assert not visible_in_feed(private)
