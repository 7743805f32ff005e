"""Social API endpoints: follow graph and activity feed."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.dependencies import get_current_caller, get_optional_caller
from wanderlust.config import get_settings
from wanderlust.database import get_session
from wanderlust.db.models import User
from wanderlust.roles.permissions import RolePermissionTable, get_permission_table
from wanderlust.social.activity_service import ActivityView, get_feed, get_user_activities
from wanderlust.social.follow_service import (
    FollowListEntry,
    follow,
    is_following,
    list_followers,
    list_following,
    unfollow,
)
from wanderlust.social.pagination import Page, clamp_limit
from wanderlust.social.schemas import (
    ActivityAuthor,
    ActivityResponse,
    FeedResponse,
    FollowListItem,
    FollowListResponse,
    IsFollowingResponse,
)

router = APIRouter(prefix="/api/v1/social", tags=["Social"])


# ── Helpers ──


def _activity_response(view: ActivityView) -> ActivityResponse:
    return ActivityResponse(
        id=view.id,
        user_id=view.user_id,
        type=view.type,
        reference_id=view.reference_id,
        metadata=view.metadata,
        created_at=view.created_at,
        user=ActivityAuthor(
            display_name=view.author_display_name,
            avatar_url=view.author_avatar_url,
            role=view.author_role,
        ),
    )


def _follow_list_response(page: Page[FollowListEntry, int]) -> FollowListResponse:
    return FollowListResponse(
        items=[
            FollowListItem(
                id=entry.user.id,
                display_name=entry.user.display_name,
                avatar_url=entry.user.avatar_url,
                bio=entry.user.bio,
                is_following=entry.is_following,
                followed_at=entry.followed_at,
            )
            for entry in page.items
        ],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


# ── Follow graph ──


@router.post("/follow/{user_id}", status_code=204)
async def follow_endpoint(
    user_id: int,
    caller: User = Depends(get_current_caller),
    db: AsyncSession = Depends(get_session),
    permissions: RolePermissionTable = Depends(get_permission_table),
) -> Response:
    """Follow a user."""
    await follow(db, caller, user_id, permissions)
    await db.commit()
    return Response(status_code=204)


@router.delete("/follow/{user_id}", status_code=204)
async def unfollow_endpoint(
    user_id: int,
    caller: User = Depends(get_current_caller),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Unfollow a user."""
    await unfollow(db, caller, user_id)
    await db.commit()
    return Response(status_code=204)


@router.get("/follow/{user_id}", response_model=IsFollowingResponse)
async def is_following_endpoint(
    user_id: int,
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
) -> IsFollowingResponse:
    """Whether the caller follows the user (false when anonymous)."""
    return IsFollowingResponse(is_following=await is_following(db, caller, user_id))


@router.get("/users/{user_id}/followers", response_model=FollowListResponse)
async def followers_endpoint(
    user_id: int,
    limit: int | None = Query(None, ge=1),
    cursor: int | None = Query(None),
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
) -> FollowListResponse:
    """Followers of a user, subject to their profile visibility."""
    settings = get_settings()
    page = await list_followers(
        db,
        user_id,
        caller,
        limit=clamp_limit(limit, settings.follow_list_default_limit, settings.follow_list_max_limit),
        cursor=cursor,
    )
    return _follow_list_response(page)


@router.get("/users/{user_id}/following", response_model=FollowListResponse)
async def following_endpoint(
    user_id: int,
    limit: int | None = Query(None, ge=1),
    cursor: int | None = Query(None),
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
) -> FollowListResponse:
    """Users a user follows, subject to their profile visibility."""
    settings = get_settings()
    page = await list_following(
        db,
        user_id,
        caller,
        limit=clamp_limit(limit, settings.follow_list_default_limit, settings.follow_list_max_limit),
        cursor=cursor,
    )
    return _follow_list_response(page)


# ── Activity ──


@router.get("/feed", response_model=FeedResponse)
async def feed_endpoint(
    limit: int | None = Query(None, ge=1),
    cursor: datetime | None = Query(None, description="next_cursor from the previous page"),
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
    permissions: RolePermissionTable = Depends(get_permission_table),
) -> FeedResponse:
    """Activity of followed users, newest first. Empty for anonymous callers."""
    settings = get_settings()
    page = await get_feed(
        db,
        caller,
        limit=clamp_limit(limit, settings.feed_default_limit, settings.feed_max_limit),
        cursor=cursor,
        permissions=permissions,
    )
    return FeedResponse(
        activities=[_activity_response(view) for view in page.activities],
        next_cursor=page.next_cursor,
    )


@router.get("/users/{user_id}/activities", response_model=list[ActivityResponse])
async def user_activities_endpoint(
    user_id: int,
    limit: int | None = Query(None, ge=1),
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
) -> list[ActivityResponse]:
    """Latest activities of one user, subject to their profile visibility."""
    settings = get_settings()
    views = await get_user_activities(
        db,
        user_id,
        caller,
        limit=clamp_limit(limit, settings.feed_default_limit, settings.feed_max_limit),
    )
    return [_activity_response(view) for view in views]
