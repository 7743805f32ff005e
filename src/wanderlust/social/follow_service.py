"""Follow graph business logic.

Rules:
- (follower, following) is unique; the database constraint backs up the pre-check
- No self-follows
- Callers without ``unlimited_follows`` may follow at most ``FreeLimits.max_follows`` users
- Following is silent: no activity is recorded
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.service import get_user_by_id, require_caller
from wanderlust.db.models import Follow, User
from wanderlust.errors import AlreadyFollowing, LimitExceeded, NotFollowing, NotFound, SelfFollow
from wanderlust.roles.permissions import UNLIMITED_FOLLOWS, RolePermissionTable, get_permission_table
from wanderlust.social.pagination import Page, paginate_after
from wanderlust.social.visibility import can_view_profile, edge_exists

logger = structlog.get_logger()

_PAIR_CONSTRAINT = "follows_pair_key"
_SQLITE_PAIR_MESSAGE = "UNIQUE constraint failed: follows.follower_id, follows.following_id"


@dataclass
class FollowListEntry:
    """A user on a follower/following list, seen from the viewer."""

    edge_id: int
    user: User
    followed_at: datetime
    is_following: bool


async def follow(
    db: AsyncSession,
    caller: User | None,
    target_id: int,
    permissions: RolePermissionTable | None = None,
) -> Follow:
    """Create the caller -> target edge."""
    caller = require_caller(caller)
    permissions = permissions or get_permission_table()

    if target_id == caller.id:
        raise SelfFollow

    target = await get_user_by_id(db, target_id)
    if target is None:
        raise NotFound("User not found")

    if await edge_exists(db, caller.id, target_id):
        raise AlreadyFollowing

    if not permissions.has_capability(caller.role, UNLIMITED_FOLLOWS):
        max_follows = permissions.limits.max_follows
        if await count_following(db, caller.id) >= max_follows:
            raise LimitExceeded(
                f"Free users can follow up to {max_follows} users. Upgrade to Pro for unlimited follows.",
                limit="max_follows",
                maximum=max_follows,
            )

    edge = Follow(
        follower_id=caller.id,
        following_id=target_id,
        created_at=datetime.now(timezone.utc),
    )
    db.add(edge)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        if is_pair_conflict(e):
            # A concurrent follow for the same pair committed first
            raise AlreadyFollowing from e
        raise

    logger.info("follow_created", follower_id=caller.id, following_id=target_id)
    return edge


def is_pair_conflict(exc: IntegrityError) -> bool:
    """True when the insert was rejected by the (follower, following) unique constraint."""
    message = str(exc.orig)
    return _PAIR_CONSTRAINT in message or _SQLITE_PAIR_MESSAGE in message


async def unfollow(db: AsyncSession, caller: User | None, target_id: int) -> None:
    """Delete the caller -> target edge."""
    caller = require_caller(caller)

    result = await db.execute(
        select(Follow)
        .where(Follow.follower_id == caller.id)
        .where(Follow.following_id == target_id)
    )
    edge = result.scalar_one_or_none()
    if edge is None:
        raise NotFollowing

    await db.delete(edge)
    await db.flush()
    logger.info("follow_removed", follower_id=caller.id, following_id=target_id)


async def is_following(db: AsyncSession, caller: User | None, target_id: int) -> bool:
    """False for anonymous callers."""
    if caller is None:
        return False
    return await edge_exists(db, caller.id, target_id)


async def followed_among(db: AsyncSession, follower_id: int, candidate_ids: list[int]) -> set[int]:
    """Which of ``candidate_ids`` the follower follows, in one query."""
    if not candidate_ids:
        return set()
    result = await db.execute(
        select(Follow.following_id)
        .where(Follow.follower_id == follower_id)
        .where(Follow.following_id.in_(candidate_ids))
    )
    return set(result.scalars().all())


async def following_ids(db: AsyncSession, user_id: int) -> list[int]:
    """Everyone ``user_id`` follows (unpaginated)."""
    result = await db.execute(select(Follow.following_id).where(Follow.follower_id == user_id))
    return list(result.scalars().all())


async def count_following(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(func.count()).select_from(Follow).where(Follow.follower_id == user_id))
    return result.scalar_one()


async def count_followers(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(select(func.count()).select_from(Follow).where(Follow.following_id == user_id))
    return result.scalar_one()


async def list_followers(
    db: AsyncSession,
    target_id: int,
    viewer: User | None,
    limit: int = 20,
    cursor: int | None = None,
) -> Page[FollowListEntry, int]:
    """Users following ``target_id``, newest edge first."""
    return await _list_edges(db, target_id, viewer, limit, cursor, followers=True)


async def list_following(
    db: AsyncSession,
    target_id: int,
    viewer: User | None,
    limit: int = 20,
    cursor: int | None = None,
) -> Page[FollowListEntry, int]:
    """Users ``target_id`` follows, newest edge first."""
    return await _list_edges(db, target_id, viewer, limit, cursor, followers=False)


async def _list_edges(
    db: AsyncSession,
    target_id: int,
    viewer: User | None,
    limit: int,
    cursor: int | None,
    *,
    followers: bool,
) -> Page[FollowListEntry, int]:
    target = await get_user_by_id(db, target_id)
    if target is None or not await can_view_profile(db, target, viewer):
        return Page()

    if followers:
        anchor, other = Follow.following_id, Follow.follower_id
    else:
        anchor, other = Follow.follower_id, Follow.following_id

    result = await db.execute(
        select(Follow, User)
        .join(User, User.id == other)
        .where(anchor == target_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
    )
    rows = list(result.all())

    page = paginate_after(rows, cursor, limit, key=lambda row: row[0].id)

    user_ids = [user.id for _, user in page.items]
    followed = await followed_among(db, viewer.id, user_ids) if viewer is not None else set()

    entries = [
        FollowListEntry(
            edge_id=edge.id,
            user=user,
            followed_at=edge.created_at,
            is_following=user.id in followed,
        )
        for edge, user in page.items
    ]
    return Page(items=entries, next_cursor=page.next_cursor, has_more=page.has_more)
