"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.auth.jwt import verify_token
from wanderlust.auth.service import require_caller, resolve_caller
from wanderlust.database import get_session
from wanderlust.db.models import User

_bearer = HTTPBearer(auto_error=False)


async def get_subject(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> str | None:
    """Subject of a valid bearer token, or None when no token was presented.

    A token that is present but invalid is rejected with 401.
    """
    if credentials is None:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    return str(payload["sub"])


async def get_required_subject(subject: str | None = Depends(get_subject)) -> str:
    """Subject for endpoints that act on the token itself (user sync)."""
    if subject is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return subject


async def get_optional_caller(
    subject: str | None = Depends(get_subject),
    db: AsyncSession = Depends(get_session),
) -> User | None:
    """Resolved caller for read endpoints; None means anonymous."""
    return await resolve_caller(db, subject)


async def get_current_caller(
    caller: User | None = Depends(get_optional_caller),
) -> User:
    """
    Resolved caller for write endpoints.

    Raises Unauthenticated (401) when no token was sent or the subject
    has not been synced into a user row yet.
    """
    return require_caller(caller)
