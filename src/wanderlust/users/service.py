"""User profile business logic."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, or_, select

from wanderlust.auth.service import get_user_by_id, require_caller
from wanderlust.db.enums import ProfileVisibility
from wanderlust.db.models import User
from wanderlust.errors import ValidationFailed
from wanderlust.social.follow_service import count_followers, count_following, followed_among
from wanderlust.social.visibility import can_view_profile, edge_exists

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

MAX_TRAVEL_STYLES = 10
MAX_LANGUAGES = 20


@dataclass
class ProfileView:
    user: User
    followers: int
    following: int
    is_own_profile: bool
    is_following: bool


@dataclass
class SearchHit:
    user: User
    is_following: bool


async def get_profile(
    db: AsyncSession,
    target_id: int | None,
    viewer: User | None,
) -> ProfileView | None:
    """
    Profile with follow counts.

    ``target_id=None`` means the viewer's own profile. Returns None when the
    user does not exist or the viewer may not see it; the two cases are
    indistinguishable to the caller.
    """
    if target_id is None:
        if viewer is None:
            return None
        target_id = viewer.id

    target = await get_user_by_id(db, target_id)
    if target is None or not await can_view_profile(db, target, viewer):
        return None

    is_own = viewer is not None and viewer.id == target.id
    following_target = False
    if viewer is not None and not is_own:
        following_target = await edge_exists(db, viewer.id, target.id)

    return ProfileView(
        user=target,
        followers=await count_followers(db, target.id),
        following=await count_following(db, target.id),
        is_own_profile=is_own,
        is_following=following_target,
    )


def _clean_tags(values: list[str], maximum: int, field: str) -> list[str]:
    """Trim, drop blanks and duplicates (keeping order), enforce the cap."""
    cleaned: list[str] = []
    for value in values:
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    if len(cleaned) > maximum:
        msg = f"At most {maximum} {field} allowed"
        raise ValidationFailed(msg)
    return cleaned


async def update_profile(
    db: AsyncSession,
    caller: User | None,
    display_name: str | None = None,
    avatar_url: str | None = None,
    bio: str | None = None,
    home_location: str | None = None,
    travel_styles: list[str] | None = None,
    languages: list[str] | None = None,
    profile_visibility: ProfileVisibility | None = None,
) -> User:
    """
    Update the caller's profile fields. Only provided fields change.

    Raises:
        Unauthenticated: no resolved caller.
        ValidationFailed: too many travel styles or languages.
    """
    user = require_caller(caller)

    if travel_styles is not None:
        user.travel_styles = _clean_tags(travel_styles, MAX_TRAVEL_STYLES, "travel styles")
    if languages is not None:
        user.languages = _clean_tags(languages, MAX_LANGUAGES, "languages")
    if display_name is not None:
        user.display_name = display_name
    if avatar_url is not None:
        user.avatar_url = avatar_url
    if bio is not None:
        user.bio = bio
    if home_location is not None:
        user.home_location = home_location
    if profile_visibility is not None:
        previous = user.visibility
        user.profile_visibility = ProfileVisibility(profile_visibility).value
        if previous.value != user.profile_visibility:
            logger.info(
                "visibility_changed",
                user_id=user.id,
                previous=previous.value,
                visibility=user.profile_visibility,
            )

    user.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return user


async def search_users(
    db: AsyncSession,
    query: str,
    viewer: User | None,
    limit: int = 20,
) -> list[SearchHit]:
    """Public profiles whose name, bio or home location contains ``query``."""
    term = query.strip().lower()
    if not term:
        return []

    pattern = f"%{term}%"
    stmt = (
        select(User)
        .where(or_(User.profile_visibility.is_(None), User.profile_visibility == ProfileVisibility.PUBLIC.value))
        .where(
            or_(
                func.lower(User.display_name).like(pattern),
                func.lower(User.bio).like(pattern),
                func.lower(User.home_location).like(pattern),
            )
        )
        .order_by(User.id)
        .limit(limit)
    )
    if viewer is not None:
        stmt = stmt.where(User.id != viewer.id)

    result = await db.execute(stmt)
    users = list(result.scalars().all())

    followed = await followed_among(db, viewer.id, [u.id for u in users]) if viewer is not None else set()
    return [SearchHit(user=u, is_following=u.id in followed) for u in users]
