"""Row builders shared by unit and integration tests."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.db.enums import ActivityType, ProfileVisibility, Role
from wanderlust.db.models import ActivityRecord, Follow, User

_seq = itertools.count(1)


async def create_user(
    db: AsyncSession,
    display_name: str | None = None,
    visibility: ProfileVisibility | None = ProfileVisibility.PUBLIC,
    role: Role | None = Role.FREE,
    email: str | None = None,
    **fields: Any,  # noqa: ANN401
) -> User:
    """Insert a user and flush."""
    n = next(_seq)
    now = datetime.now(timezone.utc)
    user = User(
        auth_subject=f"idp|{n}",
        email=email or f"traveler{n}@example.com",
        display_name=display_name or f"Traveler {n}",
        travel_styles=[],
        languages=[],
        profile_visibility=visibility.value if visibility is not None else None,
        role=role.value if role is not None else None,
        created_at=now,
        updated_at=now,
        **fields,
    )
    db.add(user)
    await db.flush()
    return user


async def create_follow(
    db: AsyncSession,
    follower: User,
    following: User,
    created_at: datetime | None = None,
) -> Follow:
    """Insert an edge directly, bypassing follow rules."""
    edge = Follow(
        follower_id=follower.id,
        following_id=following.id,
        created_at=created_at or datetime.now(timezone.utc),
    )
    db.add(edge)
    await db.flush()
    return edge


async def create_activity(
    db: AsyncSession,
    author: User,
    created_at: datetime,
    activity_type: ActivityType = ActivityType.PLACE_VISITED,
    reference_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> ActivityRecord:
    """Insert an activity with an explicit timestamp."""
    record = ActivityRecord(
        user_id=author.id,
        type=activity_type.value,
        reference_id=reference_id or f"ref-{next(_seq)}",
        activity_metadata=metadata or {},
        created_at=created_at,
    )
    db.add(record)
    await db.flush()
    return record
