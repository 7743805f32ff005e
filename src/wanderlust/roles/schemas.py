"""Pydantic schemas for role endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from wanderlust.db.enums import Role


class CurrentRoleResponse(BaseModel):
    role: Role
    permissions: list[str]


class HasPermissionResponse(BaseModel):
    permission: str
    granted: bool


class SetRoleRequest(BaseModel):
    role: Role


class AdminUserResponse(BaseModel):
    id: int
    email: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    role: Role
    created_at: datetime


class AdminUserListResponse(BaseModel):
    users: list[AdminUserResponse]
    next_cursor: int | None = None
    has_more: bool
