"""Integration tests: identity sync and profile endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from factories import create_follow, create_user
from wanderlust.auth.jwt import create_access_token
from wanderlust.db.enums import ProfileVisibility


def _bearer(subject: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject)}"}


class TestSync:
    @pytest.mark.asyncio
    async def test_first_and_second_sync(self, client: AsyncClient):
        headers = _bearer("idp|sync-1")
        first = await client.post(
            "/api/v1/users/sync",
            json={"email": "s@example.com", "display_name": "Sam"},
            headers=headers,
        )
        assert first.status_code == 200
        data = first.json()
        assert data["created"] is True
        assert data["user"]["role"] == "free"
        assert data["user"]["profile_visibility"] == "public"

        second = await client.post("/api/v1/users/sync", json={"display_name": "Samantha"}, headers=headers)
        assert second.json()["created"] is False
        assert second.json()["user"]["id"] == data["user"]["id"]
        assert second.json()["user"]["display_name"] == "Samantha"

    @pytest.mark.asyncio
    async def test_sync_requires_token(self, client: AsyncClient):
        response = await client.post("/api/v1/users/sync", json={})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestMe:
    @pytest.mark.asyncio
    async def test_unsynced_subject_is_unauthenticated(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers=_bearer("idp|ghost"))
        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_get_and_patch(self, client: AsyncClient, db_session: AsyncSession, auth_headers):
        me = await create_user(db_session, display_name="Before")
        await db_session.commit()

        response = await client.patch(
            "/api/v1/users/me",
            json={"display_name": "After", "languages": ["pt", "en"], "profile_visibility": "friends"},
            headers=auth_headers(me),
        )
        assert response.status_code == 200
        assert response.json()["display_name"] == "After"
        assert response.json()["languages"] == ["pt", "en"]
        assert response.json()["profile_visibility"] == "friends"

        response = await client.get("/api/v1/users/me", headers=auth_headers(me))
        assert response.json()["display_name"] == "After"

    @pytest.mark.asyncio
    async def test_patch_too_many_styles(self, client: AsyncClient, db_session: AsyncSession, auth_headers):
        me = await create_user(db_session)
        await db_session.commit()
        response = await client.patch(
            "/api/v1/users/me",
            json={"travel_styles": [f"s{i}" for i in range(11)]},
            headers=auth_headers(me),
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_failed"

    @pytest.mark.asyncio
    async def test_patch_bad_visibility(self, client: AsyncClient, db_session: AsyncSession, auth_headers):
        me = await create_user(db_session)
        await db_session.commit()
        response = await client.patch(
            "/api/v1/users/me",
            json={"profile_visibility": "secret"},
            headers=auth_headers(me),
        )
        assert response.status_code == 422


class TestProfile:
    @pytest.mark.asyncio
    async def test_public_profile_anonymous(self, client: AsyncClient, db_session: AsyncSession):
        target = await create_user(db_session, display_name="Ana")
        fan = await create_user(db_session)
        await create_follow(db_session, fan, target)
        await db_session.commit()

        response = await client.get(f"/api/v1/users/{target.id}/profile")
        assert response.status_code == 200
        data = response.json()
        assert data["display_name"] == "Ana"
        assert data["stats"] == {"followers": 1, "following": 0}
        assert data["is_own_profile"] is False
        assert data["is_following"] is False
        assert "email" not in data

    @pytest.mark.asyncio
    async def test_friends_profile(self, client: AsyncClient, db_session: AsyncSession, auth_headers):
        target = await create_user(db_session, visibility=ProfileVisibility.FRIENDS)
        follower = await create_user(db_session)
        stranger = await create_user(db_session)
        await create_follow(db_session, follower, target)
        await db_session.commit()

        assert (await client.get(f"/api/v1/users/{target.id}/profile")).status_code == 404
        response = await client.get(f"/api/v1/users/{target.id}/profile", headers=auth_headers(stranger))
        assert response.status_code == 404
        response = await client.get(f"/api/v1/users/{target.id}/profile", headers=auth_headers(follower))
        assert response.status_code == 200
        assert response.json()["is_following"] is True

    @pytest.mark.asyncio
    async def test_missing_profile(self, client: AsyncClient):
        response = await client.get("/api/v1/users/99999/profile")
        assert response.status_code == 404


class TestSearch:
    @pytest.mark.asyncio
    async def test_search(self, client: AsyncClient, db_session: AsyncSession):
        hit = await create_user(db_session, display_name="Wanda Wayfarer")
        await create_user(db_session, display_name="Wanda Hidden", visibility=ProfileVisibility.PRIVATE)
        await db_session.commit()

        response = await client.get("/api/v1/users/search", params={"q": "wanda"})
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [hit.id]
