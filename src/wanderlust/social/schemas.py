"""Pydantic schemas for social endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from wanderlust.db.enums import ActivityType, Role
from wanderlust.social.activity_types import ActivityMetadata


# --- Follow graph ---


class IsFollowingResponse(BaseModel):
    is_following: bool


class FollowListItem(BaseModel):
    id: int
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    is_following: bool
    followed_at: datetime


class FollowListResponse(BaseModel):
    items: list[FollowListItem]
    next_cursor: int | None = None
    has_more: bool


# --- Activity Feed ---


class ActivityAuthor(BaseModel):
    display_name: str | None = None
    avatar_url: str | None = None
    role: Role


class ActivityResponse(BaseModel):
    id: int
    user_id: int
    type: ActivityType
    reference_id: str
    metadata: ActivityMetadata
    created_at: datetime
    user: ActivityAuthor


class FeedResponse(BaseModel):
    activities: list[ActivityResponse]
    next_cursor: datetime | None = None
