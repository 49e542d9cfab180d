"""Tests for /api/v1/videos endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.db.crud.comments import add_comment
from videotube.db.crud.likes import toggle_like
from videotube.db.crud.users import get_watch_history_ids
from videotube.db.crud.videos import get_video
from videotube.models.user import User

VIDEO_FILES = {
    "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
    "thumbnail": ("thumb.png", b"thumb", "image/png"),
}


class TestPublishVideo:
    @pytest.mark.asyncio
    async def test_publish_video(self, authenticated_client: AsyncClient, content_store):
        response = await authenticated_client.post(
            "/api/v1/videos",
            data={"title": "Trip", "description": "Road trip"},
            files=VIDEO_FILES,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Trip"
        assert data["duration"] == 42.5
        assert data["isPublished"] is True
        assert data["views"] == 0
        assert data["videoFileUrl"] == content_store.uploads[0].url

    @pytest.mark.asyncio
    async def test_publish_requires_files(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/api/v1/videos", data={"title": "Trip", "description": "Road trip"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_publish_requires_title(self, authenticated_client: AsyncClient, content_store):
        response = await authenticated_client.post(
            "/api/v1/videos", data={"description": "Road trip"}, files=VIDEO_FILES
        )

        assert response.status_code == 400
        assert content_store.uploads == []

    @pytest.mark.asyncio
    async def test_publish_rejects_long_title(
        self, authenticated_client: AsyncClient, content_store
    ):
        response = await authenticated_client.post(
            "/api/v1/videos", data={"title": "x" * 256, "description": "D"}, files=VIDEO_FILES
        )

        assert response.status_code == 400
        assert "at most 255" in response.json()["message"]
        assert content_store.deleted == [("asset-1", "video"), ("asset-2", "image")]

    @pytest.mark.asyncio
    async def test_failed_thumbnail_upload_discards_video(
        self, authenticated_client: AsyncClient, content_store
    ):
        content_store.fail_after = 1
        response = await authenticated_client.post(
            "/api/v1/videos", data={"title": "Trip", "description": "D"}, files=VIDEO_FILES
        )

        assert response.status_code == 500
        assert content_store.deleted == [("asset-1", "video")]

    @pytest.mark.asyncio
    async def test_publish_requires_login(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/videos", data={"title": "T", "description": "D"}, files=VIDEO_FILES
        )
        assert response.status_code == 401


class TestListVideos:
    @pytest.mark.asyncio
    async def test_lists_published_only_with_owner(
        self, client: AsyncClient, test_user: User, make_video
    ):
        await make_video(test_user, "public")
        await make_video(test_user, "draft", is_published=False)

        response = await client.get("/api/v1/videos")

        assert response.status_code == 200
        page = response.json()["data"]
        assert page["total"] == 1
        assert page["items"][0]["title"] == "public"
        assert page["items"][0]["owner"]["username"] == "alice"

    @pytest.mark.asyncio
    async def test_search_sort_and_paginate(
        self, client: AsyncClient, test_user: User, other_user: User, make_video
    ):
        await make_video(test_user, "cats one", views=1)
        await make_video(test_user, "cats two", views=30)
        await make_video(test_user, "cats three", views=20)
        await make_video(other_user, "dogs", views=99)

        response = await client.get(
            "/api/v1/videos",
            params={"query": "CATS", "sortBy": "views", "sortType": "desc", "limit": 2},
        )

        page = response.json()["data"]
        assert page["total"] == 3
        assert page["pages"] == 2
        assert [v["title"] for v in page["items"]] == ["cats two", "cats three"]

        second = await client.get(
            "/api/v1/videos",
            params={"query": "cats", "sortBy": "views", "sortType": "desc", "limit": 2, "page": 2},
        )
        assert [v["title"] for v in second.json()["data"]["items"]] == ["cats one"]

    @pytest.mark.asyncio
    async def test_filter_by_owner(
        self, client: AsyncClient, test_user: User, other_user: User, make_video
    ):
        await make_video(test_user, "mine")
        await make_video(other_user, "theirs")

        response = await client.get("/api/v1/videos", params={"userId": other_user.id})

        assert [v["title"] for v in response.json()["data"]["items"]] == ["theirs"]

    @pytest.mark.asyncio
    async def test_invalid_sort_field(self, client: AsyncClient):
        response = await client.get("/api/v1/videos", params={"sortBy": "password_hash"})
        assert response.status_code == 400


class TestVideoDetail:
    @pytest.mark.asyncio
    async def test_detail_counts_view(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User, make_video
    ):
        video = await make_video(test_user, "clip", views=3)

        response = await client.get(f"/api/v1/videos/{video.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["views"] == 4
        assert data["likesCount"] == 0
        assert data["isLiked"] is False
        assert data["owner"]["username"] == "alice"
        assert (await get_video(db_session, video.id)).views == 4

    @pytest.mark.asyncio
    async def test_detail_for_signed_in_viewer(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_user: User,
        other_user: User,
        make_video,
        auth_headers,
    ):
        video = await make_video(test_user, "clip")
        await toggle_like(db_session, other_user.id, video_id=video.id)
        await client.post(
            f"/api/v1/subscriptions/c/{test_user.id}", headers=auth_headers(other_user)
        )

        response = await client.get(f"/api/v1/videos/{video.id}", headers=auth_headers(other_user))

        data = response.json()["data"]
        assert data["isLiked"] is True
        assert data["likesCount"] == 1
        assert data["owner"]["isSubscribed"] is True
        assert data["owner"]["subscribersCount"] == 1
        assert await get_watch_history_ids(db_session, other_user.id) == [video.id]

    @pytest.mark.asyncio
    async def test_unpublished_hidden_from_others(
        self, client: AsyncClient, test_user: User, other_user: User, make_video, auth_headers
    ):
        draft = await make_video(test_user, "draft", is_published=False)

        hidden = await client.get(f"/api/v1/videos/{draft.id}", headers=auth_headers(other_user))
        own = await client.get(f"/api/v1/videos/{draft.id}", headers=auth_headers(test_user))

        assert hidden.status_code == 404
        assert own.status_code == 200


class TestModifyVideo:
    @pytest.mark.asyncio
    async def test_update_with_new_thumbnail(
        self, authenticated_client: AsyncClient, test_user: User, make_video, content_store
    ):
        video = await make_video(test_user, "clip")

        response = await authenticated_client.patch(
            f"/api/v1/videos/{video.id}",
            data={"title": "Renamed", "description": "Better"},
            files={"thumbnail": ("new.png", b"thumb", "image/png")},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["thumbnailUrl"] == content_store.uploads[-1].url
        assert ("clip-thumb", "image") in content_store.deleted

    @pytest.mark.asyncio
    async def test_update_by_non_owner(
        self, authenticated_client: AsyncClient, other_user: User, make_video
    ):
        video = await make_video(other_user, "theirs")

        response = await authenticated_client.patch(
            f"/api/v1/videos/{video.id}", data={"title": "Mine", "description": "now"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_toggle_publish(
        self, authenticated_client: AsyncClient, test_user: User, make_video
    ):
        video = await make_video(test_user, "clip")

        first = await authenticated_client.patch(f"/api/v1/videos/toggle/publish/{video.id}")
        second = await authenticated_client.patch(f"/api/v1/videos/toggle/publish/{video.id}")

        assert first.json()["data"]["isPublished"] is False
        assert second.json()["data"]["isPublished"] is True

    @pytest.mark.asyncio
    async def test_delete_cascades_and_removes_assets(
        self,
        authenticated_client: AsyncClient,
        db_session: AsyncSession,
        test_user: User,
        other_user: User,
        make_video,
        content_store,
    ):
        video = await make_video(test_user, "clip")
        comment = await add_comment(db_session, video.id, other_user.id, "nice")
        await toggle_like(db_session, other_user.id, comment_id=comment.id)
        await toggle_like(db_session, other_user.id, video_id=video.id)

        response = await authenticated_client.delete(f"/api/v1/videos/{video.id}")

        assert response.status_code == 200
        assert await get_video(db_session, video.id) is None
        assert ("clip-file", "video") in content_store.deleted
        assert ("clip-thumb", "image") in content_store.deleted
        missing = await authenticated_client.get(f"/api/v1/comments/{video.id}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_video(self, authenticated_client: AsyncClient):
        response = await authenticated_client.delete("/api/v1/videos/999")
        assert response.status_code == 404
