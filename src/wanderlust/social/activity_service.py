"""Activity log writer and feed assembly."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.service import get_user_by_id
from wanderlust.db.enums import ActivityType, ProfileVisibility, Role
from wanderlust.db.models import ActivityRecord, User
from wanderlust.roles.permissions import FULL_FEED, RolePermissionTable, get_permission_table
from wanderlust.social.activity_types import ActivityMetadata, coerce_metadata, dump_metadata, load_metadata
from wanderlust.social.follow_service import following_ids
from wanderlust.social.pagination import take_page
from wanderlust.social.visibility import can_view_profile, visible_in_feed

logger = structlog.get_logger()


@dataclass
class ActivityView:
    """An activity joined with its author's display fields at read time."""

    id: int
    user_id: int
    type: ActivityType
    reference_id: str
    metadata: ActivityMetadata
    created_at: datetime
    author_display_name: str | None
    author_avatar_url: str | None
    author_role: Role


@dataclass
class FeedPage:
    activities: list[ActivityView]
    next_cursor: datetime | None = None


def _view(record: ActivityRecord, author: User) -> ActivityView:
    return ActivityView(
        id=record.id,
        user_id=record.user_id,
        type=ActivityType(record.type),
        reference_id=record.reference_id,
        metadata=load_metadata(record.type, record.activity_metadata),
        created_at=record.created_at,
        author_display_name=author.display_name,
        author_avatar_url=author.avatar_url,
        author_role=author.effective_role,
    )


async def record_activity(
    db: AsyncSession,
    actor_id: int,
    activity_type: ActivityType | str,
    reference_id: str,
    metadata: ActivityMetadata | dict[str, Any] | None = None,
) -> ActivityRecord | None:
    """Append an activity for ``actor_id``. Best effort: never raises.

    Skipped when the actor does not exist or their profile is private at write
    time. The insert runs in a savepoint so a failure here cannot roll back the
    action that triggered it.
    """
    try:
        actor = await get_user_by_id(db, actor_id)
        if actor is None:
            logger.info("activity_skipped", actor_id=actor_id, reason="actor_not_found")
            return None
        if actor.visibility is ProfileVisibility.PRIVATE:
            logger.info("activity_skipped", actor_id=actor_id, reason="private_profile")
            return None

        kind = ActivityType(activity_type)
        record = ActivityRecord(
            user_id=actor_id,
            type=kind.value,
            reference_id=reference_id,
            activity_metadata=dump_metadata(coerce_metadata(kind, metadata)),
            created_at=datetime.now(timezone.utc),
        )
        async with db.begin_nested():
            db.add(record)
    except Exception:
        logger.warning(
            "activity_record_failed",
            actor_id=actor_id,
            activity_type=getattr(activity_type, "value", activity_type),
            exc_info=True,
        )
        return None

    logger.info("activity_recorded", actor_id=actor_id, activity_type=kind.value, activity_id=record.id)
    return record


def feed_cutoff(
    caller: User,
    permissions: RolePermissionTable,
    now: datetime | None = None,
) -> datetime | None:
    """Oldest timestamp the caller may see; None means unbounded (full_feed)."""
    if permissions.has_capability(caller.role, FULL_FEED):
        return None
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=permissions.limits.feed_history_days)


async def get_feed(
    db: AsyncSession,
    caller: User | None,
    limit: int = 20,
    cursor: datetime | None = None,
    permissions: RolePermissionTable | None = None,
    now: datetime | None = None,
) -> FeedPage:
    """
    Newest-first activity of everyone the caller follows.

    ``cursor`` is an exclusive upper bound: only activity strictly older than it
    is returned. Callers without ``full_feed`` see at most the configured history
    window. Private authors are left out even if the caller follows them.
    """
    if caller is None:
        return FeedPage(activities=[])

    followed = await following_ids(db, caller.id)
    if not followed:
        return FeedPage(activities=[])

    permissions = permissions or get_permission_table()
    cutoff = feed_cutoff(caller, permissions, now)

    users_result = await db.execute(select(User).where(User.id.in_(followed)))
    authors = {user.id: user for user in users_result.scalars() if visible_in_feed(user)}
    if not authors:
        return FeedPage(activities=[])

    query = (
        select(ActivityRecord)
        .where(ActivityRecord.user_id.in_(list(authors)))
        .order_by(ActivityRecord.created_at.desc(), ActivityRecord.id.desc())
    )
    if cursor is not None:
        query = query.where(ActivityRecord.created_at < cursor)
    if cutoff is not None:
        query = query.where(ActivityRecord.created_at >= cutoff)

    # Fetch one extra to detect has_more
    result = await db.execute(query.limit(limit + 1))
    page = take_page(list(result.scalars().all()), limit, key=lambda record: record.created_at)

    return FeedPage(
        activities=[_view(record, authors[record.user_id]) for record in page.items],
        next_cursor=page.next_cursor,
    )


async def get_user_activities(
    db: AsyncSession,
    target_id: int,
    viewer: User | None,
    limit: int = 20,
) -> list[ActivityView]:
    """Latest ``limit`` activities of one user, behind the profile visibility gate."""
    target = await get_user_by_id(db, target_id)
    if target is None or not await can_view_profile(db, target, viewer):
        return []

    result = await db.execute(
        select(ActivityRecord)
        .where(ActivityRecord.user_id == target_id)
        .order_by(ActivityRecord.created_at.desc(), ActivityRecord.id.desc())
        .limit(limit)
    )
    return [_view(record, target) for record in result.scalars()]
