"""Role endpoints: /api/v1/roles/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.dependencies import get_current_caller, get_optional_caller
from wanderlust.config import get_settings
from wanderlust.database import get_session
from wanderlust.db.enums import Role
from wanderlust.db.models import User
from wanderlust.roles.permissions import RolePermissionTable, get_permission_table
from wanderlust.roles.schemas import (
    AdminUserListResponse,
    AdminUserResponse,
    CurrentRoleResponse,
    HasPermissionResponse,
    SetRoleRequest,
)
from wanderlust.roles.service import current_role, has_permission, list_users, set_user_role
from wanderlust.social.pagination import clamp_limit

router = APIRouter(prefix="/api/v1/roles", tags=["Roles"])


def _admin_user_response(user: User) -> AdminUserResponse:
    return AdminUserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
        role=user.effective_role,
        created_at=user.created_at,
    )


@router.get("/me", response_model=CurrentRoleResponse)
async def current_role_endpoint(
    caller: User | None = Depends(get_optional_caller),
    permissions: RolePermissionTable = Depends(get_permission_table),
) -> CurrentRoleResponse:
    """Caller's role and capability list (free for anonymous callers)."""
    role, capabilities = current_role(caller, permissions)
    return CurrentRoleResponse(role=role, permissions=capabilities)


@router.get("/me/permissions/{permission}", response_model=HasPermissionResponse)
async def has_permission_endpoint(
    permission: str,
    caller: User | None = Depends(get_optional_caller),
    permissions: RolePermissionTable = Depends(get_permission_table),
) -> HasPermissionResponse:
    """Whether the caller holds a named capability."""
    return HasPermissionResponse(
        permission=permission,
        granted=has_permission(caller, permission, permissions),
    )


@router.put("/users/{user_id}", response_model=AdminUserResponse)
async def set_role_endpoint(
    user_id: int,
    body: SetRoleRequest,
    caller: User = Depends(get_current_caller),
    db: AsyncSession = Depends(get_session),
    permissions: RolePermissionTable = Depends(get_permission_table),
) -> AdminUserResponse:
    """Assign a role (requires manage_roles)."""
    user = await set_user_role(db, caller, user_id, body.role, permissions)
    await db.commit()
    return _admin_user_response(user)


@router.get("/users", response_model=AdminUserListResponse)
async def list_users_endpoint(
    role: Role | None = Query(None),
    search: str | None = Query(None, max_length=100),
    limit: int | None = Query(None, ge=1),
    cursor: int | None = Query(None),
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
    permissions: RolePermissionTable = Depends(get_permission_table),
) -> AdminUserListResponse:
    """Admin user list (empty unless the caller has admin_panel)."""
    settings = get_settings()
    page = await list_users(
        db,
        caller,
        role=role,
        search=search,
        limit=clamp_limit(limit, settings.admin_list_default_limit, 100),
        cursor=cursor,
        permissions=permissions,
    )
    return AdminUserListResponse(
        users=[_admin_user_response(user) for user in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )
