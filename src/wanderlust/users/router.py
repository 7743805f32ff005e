"""User endpoints: /api/v1/users/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.dependencies import get_current_caller, get_optional_caller, get_required_subject
from wanderlust.auth.service import sync_user
from wanderlust.config import get_settings
from wanderlust.database import get_session
from wanderlust.db.models import User
from wanderlust.social.pagination import clamp_limit
from wanderlust.users.schemas import (
    ProfileResponse,
    ProfileStats,
    ProfileUpdateRequest,
    SyncRequest,
    SyncResponse,
    UserResponse,
    UserSearchResult,
)
from wanderlust.users.service import get_profile, search_users, update_profile

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


def _user_response(user: User) -> UserResponse:
    """Build a UserResponse from a User model."""
    return UserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
        bio=user.bio,
        home_location=user.home_location,
        travel_styles=user.travel_styles or [],
        languages=user.languages or [],
        profile_visibility=user.visibility,
        role=user.effective_role,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# ---------------------------------------------------------------------------
# Identity sync
# ---------------------------------------------------------------------------


@router.post("/sync", response_model=SyncResponse)
async def sync_endpoint(
    body: SyncRequest,
    subject: str = Depends(get_required_subject),
    db: AsyncSession = Depends(get_session),
) -> SyncResponse:
    """Create or refresh the user row for the token's subject."""
    user, created = await sync_user(
        db,
        subject,
        email=body.email,
        display_name=body.display_name,
        avatar_url=body.avatar_url,
    )
    await db.commit()
    return SyncResponse(user=_user_response(user), created=created)


# ---------------------------------------------------------------------------
# Own profile
# ---------------------------------------------------------------------------


@router.get("/me", response_model=UserResponse)
async def get_me(
    caller: User = Depends(get_current_caller),
) -> UserResponse:
    """Get own full profile."""
    return _user_response(caller)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    body: ProfileUpdateRequest,
    caller: User = Depends(get_current_caller),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update profile fields and visibility."""
    user = await update_profile(
        db,
        caller,
        display_name=body.display_name,
        avatar_url=body.avatar_url,
        bio=body.bio,
        home_location=body.home_location,
        travel_styles=body.travel_styles,
        languages=body.languages,
        profile_visibility=body.profile_visibility,
    )
    await db.commit()
    return _user_response(user)


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


@router.get("/search", response_model=list[UserSearchResult])
async def search_endpoint(
    q: str = Query(..., max_length=100),
    limit: int | None = Query(None, ge=1),
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
) -> list[UserSearchResult]:
    """Search public profiles by name, bio or home location."""
    settings = get_settings()
    hits = await search_users(db, q, caller, limit=clamp_limit(limit, settings.search_default_limit, 50))
    return [
        UserSearchResult(
            id=hit.user.id,
            display_name=hit.user.display_name,
            avatar_url=hit.user.avatar_url,
            bio=hit.user.bio,
            home_location=hit.user.home_location,
            is_following=hit.is_following,
        )
        for hit in hits
    ]


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def profile_endpoint(
    user_id: int,
    caller: User | None = Depends(get_optional_caller),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """A user's profile. 404 when missing or hidden by their visibility setting."""
    view = await get_profile(db, user_id, caller)
    if view is None:
        raise HTTPException(status_code=404, detail="User not found")

    user = view.user
    return ProfileResponse(
        id=user.id,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
        bio=user.bio,
        home_location=user.home_location,
        travel_styles=user.travel_styles or [],
        languages=user.languages or [],
        profile_visibility=user.visibility,
        role=user.effective_role,
        created_at=user.created_at,
        stats=ProfileStats(followers=view.followers, following=view.following),
        is_own_profile=view.is_own_profile,
        is_following=view.is_following,
    )
