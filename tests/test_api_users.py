"""Tests for /api/v1/users endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.db.crud.users import get_user
from videotube.models.user import User

TEST_PASSWORD = "pw123456"
AVATAR = {"avatar": ("avatar.png", b"\x89PNG fake", "image/png")}


def registration(username: str = "carol", email: str = "carol@example.com") -> dict:
    return {
        "fullName": "Carol Poe",
        "email": email,
        "username": username,
        "password": TEST_PASSWORD,
    }


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_public_projection(self, client: AsyncClient, content_store):
        response = await client.post(
            "/api/v1/users/register", data=registration(), files=AVATAR
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        user = body["data"]
        assert user["username"] == "carol"
        assert user["fullName"] == "Carol Poe"
        assert user["avatarUrl"] == content_store.uploads[0].url
        assert "password" not in user and "passwordHash" not in user
        assert "refreshToken" not in user

    @pytest.mark.asyncio
    async def test_register_with_cover_image(self, client: AsyncClient):
        files = {**AVATAR, "coverImage": ("cover.png", b"cover", "image/png")}
        response = await client.post("/api/v1/users/register", data=registration(), files=files)

        assert response.status_code == 201
        assert response.json()["data"]["coverImageUrl"] is not None

    @pytest.mark.asyncio
    async def test_register_requires_avatar(self, client: AsyncClient):
        response = await client.post("/api/v1/users/register", data=registration())

        assert response.status_code == 400
        assert response.json()["message"] == "Avatar file is required"

    @pytest.mark.asyncio
    async def test_register_requires_all_fields(self, client: AsyncClient):
        data = {**registration(), "fullName": "  "}
        response = await client.post("/api/v1/users/register", data=data, files=AVATAR)

        assert response.status_code == 400
        assert response.json()["errors"] == []

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, client: AsyncClient, test_user: User):
        data = registration(username="Alice", email="new@example.com")
        response = await client.post("/api/v1/users/register", data=data, files=AVATAR)

        assert response.status_code == 409
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_failed_upload_is_internal_failure(self, client: AsyncClient, content_store):
        content_store.fail_uploads = True
        response = await client.post(
            "/api/v1/users/register", data=registration(), files=AVATAR
        )

        assert response.status_code == 500
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    async def test_failed_cover_upload_discards_avatar(
        self, client: AsyncClient, content_store
    ):
        content_store.fail_after = 1
        files = {**AVATAR, "coverImage": ("cover.png", b"cover", "image/png")}
        response = await client.post("/api/v1/users/register", data=registration(), files=files)

        assert response.status_code == 500
        assert [a.public_id for a in content_store.uploads] == ["asset-1"]
        assert content_store.deleted == [("asset-1", "image")]

    @pytest.mark.asyncio
    async def test_uploaded_file_is_staged_intact(self, client: AsyncClient, content_store):
        response = await client.post(
            "/api/v1/users/register", data=registration(), files=AVATAR
        )

        assert response.status_code == 201
        assert content_store.staged == [b"\x89PNG fake"]
        assert content_store.deleted == []


class TestLoginFlow:
    @pytest.mark.asyncio
    async def test_login_sets_cookies_and_returns_tokens(
        self, client: AsyncClient, test_user: User
    ):
        response = await client.post(
            "/api/v1/users/login", json={"username": "alice", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == test_user.id
        assert data["accessToken"] and data["refreshToken"]
        assert response.cookies.get("accessToken") == data["accessToken"]
        assert response.cookies.get("refreshToken") == data["refreshToken"]
        set_cookie = " ".join(response.headers.get_list("set-cookie")).lower()
        assert "httponly" in set_cookie

    @pytest.mark.asyncio
    async def test_login_with_email(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user: User):
        response = await client.post(
            "/api/v1/users/login", json={"username": "alice", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/users/login", json={"username": "ghost", "password": TEST_PASSWORD}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_refresh_rotates_and_rejects_reuse(self, client: AsyncClient, test_user: User):
        login = await client.post(
            "/api/v1/users/login", json={"username": "alice", "password": TEST_PASSWORD}
        )
        old_refresh = login.json()["data"]["refreshToken"]
        client.cookies.clear()

        refreshed = await client.post(
            "/api/v1/users/refresh-token", json={"refreshToken": old_refresh}
        )
        assert refreshed.status_code == 200
        assert refreshed.json()["data"]["refreshToken"] != old_refresh
        client.cookies.clear()

        reused = await client.post(
            "/api/v1/users/refresh-token", json={"refreshToken": old_refresh}
        )
        assert reused.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_clears_stored_token(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers
    ):
        await client.post(
            "/api/v1/users/login", json={"username": "alice", "password": TEST_PASSWORD}
        )
        client.cookies.clear()

        response = await client.post("/api/v1/users/logout", headers=auth_headers(test_user))

        assert response.status_code == 200
        stored = await get_user(db_session, test_user.id)
        assert stored.refresh_token is None

    @pytest.mark.asyncio
    async def test_current_user_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/current-user")

        assert response.status_code == 401
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    async def test_current_user_with_bearer(
        self, client: AsyncClient, test_user: User, auth_headers
    ):
        response = await client.get("/api/v1/users/current-user", headers=auth_headers(test_user))

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_invalid_bearer_rejected(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/users/current-user", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient, test_user: User, auth_headers):
        response = await client.post(
            "/api/v1/users/change-password",
            json={"oldPassword": TEST_PASSWORD, "newPassword": "another-pass"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 200

        login = await client.post(
            "/api/v1/users/login", json={"username": "alice", "password": "another-pass"}
        )
        assert login.status_code == 200


class TestAccount:
    @pytest.mark.asyncio
    async def test_update_account(self, authenticated_client: AsyncClient):
        response = await authenticated_client.patch(
            "/api/v1/users/update-account",
            json={"fullName": "Alice Smith", "email": "alice.smith@example.com"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fullName"] == "Alice Smith"
        assert data["email"] == "alice.smith@example.com"

    @pytest.mark.asyncio
    async def test_update_account_requires_both_fields(self, authenticated_client: AsyncClient):
        response = await authenticated_client.patch(
            "/api/v1/users/update-account", json={"fullName": "Alice Smith"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_account_email_taken(
        self, authenticated_client: AsyncClient, other_user: User
    ):
        response = await authenticated_client.patch(
            "/api/v1/users/update-account",
            json={"fullName": "Alice", "email": "bob@example.com"},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_avatar_replaced_and_old_asset_deleted(
        self, authenticated_client: AsyncClient, content_store
    ):
        response = await authenticated_client.patch("/api/v1/users/avatar", files=AVATAR)

        assert response.status_code == 200
        assert response.json()["data"]["avatarUrl"] == content_store.uploads[-1].url
        assert ("alice-avatar", "image") in content_store.deleted

    @pytest.mark.asyncio
    async def test_cover_image_update(self, authenticated_client: AsyncClient, content_store):
        response = await authenticated_client.patch(
            "/api/v1/users/cover-image",
            files={"coverImage": ("cover.png", b"cover", "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["data"]["coverImageUrl"] == content_store.uploads[-1].url
        # No previous cover image to delete
        assert content_store.deleted == []


class TestChannelProfile:
    @pytest.mark.asyncio
    async def test_channel_profile_counts(
        self,
        client: AsyncClient,
        test_user: User,
        other_user: User,
        auth_headers,
    ):
        await client.post(
            f"/api/v1/subscriptions/c/{test_user.id}", headers=auth_headers(other_user)
        )

        response = await client.get("/api/v1/users/c/ALICE", headers=auth_headers(other_user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["subscribersCount"] == 1
        assert data["channelsSubscribedToCount"] == 0
        assert data["isSubscribed"] is True

    @pytest.mark.asyncio
    async def test_channel_profile_anonymous(self, client: AsyncClient, test_user: User):
        response = await client.get("/api/v1/users/c/alice")

        assert response.status_code == 200
        assert response.json()["data"]["isSubscribed"] is False

    @pytest.mark.asyncio
    async def test_unknown_channel(self, client: AsyncClient):
        response = await client.get("/api/v1/users/c/nobody")
        assert response.status_code == 404


class TestWatchHistory:
    @pytest.mark.asyncio
    async def test_history_in_first_watch_order_without_duplicates(
        self, authenticated_client: AsyncClient, other_user: User, make_video
    ):
        first = await make_video(other_user, "first")
        second = await make_video(other_user, "second")

        for video in (first, second, first):
            response = await authenticated_client.get(f"/api/v1/videos/{video.id}")
            assert response.status_code == 200

        response = await authenticated_client.get("/api/v1/users/history")

        history = response.json()["data"]
        assert [v["id"] for v in history] == [first.id, second.id]
        assert history[0]["owner"]["username"] == "bob"
