"""Pydantic schemas for user endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from wanderlust.db.enums import ProfileVisibility, Role


class SyncRequest(BaseModel):
    email: str | None = Field(None, max_length=320)
    display_name: str | None = Field(None, max_length=64)
    avatar_url: str | None = None


class ProfileUpdateRequest(BaseModel):
    display_name: str | None = Field(None, min_length=1, max_length=64)
    avatar_url: str | None = None
    bio: str | None = Field(None, max_length=500)
    home_location: str | None = Field(None, max_length=128)
    travel_styles: list[str] | None = None
    languages: list[str] | None = None
    profile_visibility: ProfileVisibility | None = None


class UserResponse(BaseModel):
    """Own full profile."""

    id: int
    email: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    home_location: str | None = None
    travel_styles: list[str] = []
    languages: list[str] = []
    profile_visibility: ProfileVisibility
    role: Role
    created_at: datetime
    updated_at: datetime


class SyncResponse(BaseModel):
    user: UserResponse
    created: bool


class ProfileStats(BaseModel):
    followers: int
    following: int


class ProfileResponse(BaseModel):
    id: int
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    home_location: str | None = None
    travel_styles: list[str] = []
    languages: list[str] = []
    profile_visibility: ProfileVisibility
    role: Role
    created_at: datetime
    stats: ProfileStats
    is_own_profile: bool
    is_following: bool


class UserSearchResult(BaseModel):
    id: int
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    home_location: str | None = None
    is_following: bool
