"""Profile visibility gate.

- public:  anyone, including anonymous viewers
- friends: the owner, or a viewer who follows the owner (viewer -> owner edge)
- private: the owner only

The feed applies a stricter rule: private authors never appear, whatever the
viewer's relationship to them.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.db.enums import ProfileVisibility
from wanderlust.db.models import Follow, User


async def edge_exists(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    """Existence check on the unique (follower, following) pair."""
    result = await db.execute(
        select(Follow.id)
        .where(Follow.follower_id == follower_id)
        .where(Follow.following_id == following_id)
    )
    return result.scalar_one_or_none() is not None


async def can_view_profile(db: AsyncSession, target: User, viewer: User | None) -> bool:
    """Whether ``viewer`` may see ``target``'s profile, activity and follow lists."""
    if viewer is not None and viewer.id == target.id:
        return True

    visibility = target.visibility
    if visibility is ProfileVisibility.PUBLIC:
        return True
    if visibility is ProfileVisibility.PRIVATE or viewer is None:
        return False

    # friends: direction matters, only followers of the target get through
    return await edge_exists(db, viewer.id, target.id)


def visible_in_feed(author: User) -> bool:
    """Feed-only rule: private authors are excluded outright."""
    return author.visibility is not ProfileVisibility.PRIVATE
