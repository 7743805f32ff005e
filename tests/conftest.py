"""Shared test fixtures.

Every test runs against its own in-memory SQLite database created from the ORM
metadata, so tests need no cleanup. Tokens are HS256-signed with a test secret.
"""

from __future__ import annotations

import os

os.environ["WANDERLUST_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["WANDERLUST_JWT_ALGORITHM"] = "HS256"
os.environ["WANDERLUST_JWT_SECRET"] = "wanderlust-test-secret-0123456789abcdef"
os.environ["WANDERLUST_LOG_FORMAT"] = "console"
os.environ["WANDERLUST_REDIS_URL"] = ""

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from wanderlust.auth.jwt import create_access_token, reset_keys  # noqa: E402
from wanderlust.config import get_settings  # noqa: E402
from wanderlust.database import close_db, create_all, get_session, init_db  # noqa: E402
from wanderlust.db.models import User  # noqa: E402
from wanderlust.main import create_app  # noqa: E402
from wanderlust.roles.permissions import get_permission_table  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_caches() -> None:
    """Settings, signing keys and the permission table are rebuilt per test."""
    get_settings.cache_clear()
    get_permission_table.cache_clear()
    reset_keys()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Direct database session on a fresh schema."""
    settings = get_settings()
    await init_db(settings.database_url)
    await create_all()
    async for session in get_session():
        yield session
        break
    await close_db()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client sharing the database behind ``db_session``."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build a bearer header for a user's auth subject."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.auth_subject, email=user.email)
        return {"Authorization": f"Bearer {token}"}

    return _headers
