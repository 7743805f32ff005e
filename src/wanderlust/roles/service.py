"""Role management business logic."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.service import get_user_by_id, require_caller
from wanderlust.db.enums import Role
from wanderlust.db.models import User
from wanderlust.errors import AuthorizationDenied, LimitExceeded, NotFound
from wanderlust.roles.permissions import (
    ADMIN_PANEL,
    MANAGE_ROLES,
    UNLIMITED_SHARES,
    RolePermissionTable,
    get_permission_table,
)
from wanderlust.social.pagination import Page, paginate_after

logger = structlog.get_logger()

# Upper bound on rows scanned when an admin search is applied in memory
_SEARCH_SCAN_LIMIT = 500


def current_role(
    caller: User | None,
    permissions: RolePermissionTable | None = None,
) -> tuple[Role, list[str]]:
    """Role and capability list for the caller; anonymous callers are free."""
    permissions = permissions or get_permission_table()
    role = caller.effective_role if caller is not None else Role.FREE
    return role, permissions.ordered_capabilities(role)


def has_permission(
    caller: User | None,
    capability: str,
    permissions: RolePermissionTable | None = None,
) -> bool:
    permissions = permissions or get_permission_table()
    return permissions.has_capability(caller.role if caller is not None else None, capability)


async def set_user_role(
    db: AsyncSession,
    caller: User | None,
    target_id: int,
    role: Role,
    permissions: RolePermissionTable | None = None,
) -> User:
    """Assign ``role`` to ``target_id``. Requires ``manage_roles``."""
    caller = require_caller(caller)
    permissions = permissions or get_permission_table()
    if not permissions.has_capability(caller.role, MANAGE_ROLES):
        raise AuthorizationDenied("Not authorized to manage roles")

    target = await get_user_by_id(db, target_id)
    if target is None:
        raise NotFound("User not found")

    previous = target.effective_role
    now = datetime.now(timezone.utc)
    target.role = Role(role).value
    target.role_updated_at = now
    target.updated_at = now
    await db.flush()

    logger.info("role_updated", user_id=target.id, previous=previous.value, role=target.role, by=caller.id)
    return target


async def list_users(
    db: AsyncSession,
    caller: User | None,
    role: Role | None = None,
    search: str | None = None,
    limit: int = 50,
    cursor: int | None = None,
    permissions: RolePermissionTable | None = None,
) -> Page[User, int]:
    """Admin-panel user listing. Callers without ``admin_panel`` get an empty page."""
    permissions = permissions or get_permission_table()
    if caller is None or not permissions.has_capability(caller.role, ADMIN_PANEL):
        return Page()

    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    if role is Role.FREE:
        query = query.where(or_(User.role.is_(None), User.role == Role.FREE.value))
    elif role is not None:
        query = query.where(User.role == role.value)

    term = (search or "").strip().lower()
    if term:
        pattern = f"%{term}%"
        query = query.where(
            or_(
                func.lower(User.email).like(pattern),
                func.lower(User.display_name).like(pattern),
            )
        ).limit(_SEARCH_SCAN_LIMIT)

    result = await db.execute(query)
    users = list(result.scalars().all())
    return paginate_after(users, cursor, limit, key=lambda user: user.id)


def ensure_can_share(
    role: Role | str | None,
    shared_count: int,
    permissions: RolePermissionTable | None = None,
) -> None:
    """Guard for creating another trip share link.

    Raises:
        LimitExceeded: caller lacks ``unlimited_shares`` and is at the free cap.
    """
    permissions = permissions or get_permission_table()
    if permissions.has_capability(role, UNLIMITED_SHARES):
        return
    maximum = permissions.limits.max_shared_trips
    if shared_count >= maximum:
        raise LimitExceeded(
            f"Free users can share up to {maximum} trips. Upgrade to Pro for unlimited shares.",
            limit="max_shared_trips",
            maximum=maximum,
        )


async def promote_to_admin(db: AsyncSession, email: str) -> User | None:
    """Make the user with ``email`` an admin (first-admin bootstrap)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    user = result.scalars().first()
    if user is None:
        return None

    now = datetime.now(timezone.utc)
    user.role = Role.ADMIN.value
    user.role_updated_at = now
    user.updated_at = now
    await db.flush()
    logger.info("role_updated", user_id=user.id, role=user.role, by="bootstrap")
    return user
