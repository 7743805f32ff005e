"""
Identity resolution and user sync.

Maps the identity provider's subject onto a ``users`` row through the unique
``auth_subject`` index. Absence is never an error here; callers decide whether
an unresolved caller means "anonymous" (reads) or ``Unauthenticated`` (writes).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from wanderlust.db.enums import ProfileVisibility, Role
from wanderlust.db.models import User
from wanderlust.errors import Unauthenticated

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by internal ID."""
    return await db.get(User, user_id)


async def resolve_caller(db: AsyncSession, subject: str | None) -> User | None:
    """Resolve an authenticated subject to its user row, or None."""
    if not subject:
        return None
    result = await db.execute(select(User).where(User.auth_subject == subject))
    return result.scalar_one_or_none()


def require_caller(caller: User | None) -> User:
    """Writes need a resolved caller."""
    if caller is None:
        raise Unauthenticated
    return caller


async def sync_user(
    db: AsyncSession,
    subject: str,
    email: str | None = None,
    display_name: str | None = None,
    avatar_url: str | None = None,
) -> tuple[User, bool]:
    """
    Get or create the user for ``subject``, refreshing provider-owned fields.

    Returns:
        Tuple of (user, created).
    """
    user = await resolve_caller(db, subject)
    now = datetime.now(timezone.utc)

    if user is not None:
        changed = False
        if email and email != user.email:
            user.email = email
            changed = True
        if display_name and display_name != user.display_name:
            user.display_name = display_name
            changed = True
        if avatar_url and avatar_url != user.avatar_url:
            user.avatar_url = avatar_url
            changed = True
        if changed:
            user.updated_at = now
            await db.flush()
        return user, False

    user = User(
        auth_subject=subject,
        email=email,
        display_name=display_name,
        avatar_url=avatar_url,
        travel_styles=[],
        languages=[],
        profile_visibility=ProfileVisibility.PUBLIC.value,
        role=Role.FREE.value,
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Concurrent first sync for the same subject won the insert
        await db.rollback()
        existing = await resolve_caller(db, subject)
        if existing is None:
            raise
        return existing, False

    logger.info("user_synced", user_id=user.id, created=True)
    return user, True
