"""Tests for playlist CRUD operations."""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.db.crud.playlists import (
    add_video_to_playlist,
    create_playlist,
    delete_playlist,
    get_playlist_video_ids,
    get_user_playlists,
    remove_video_from_playlist,
)
from videotube.db.crud.videos import delete_video
from videotube.exceptions import NotFound, Unauthorized, ValidationError
from videotube.models.playlist import PlaylistVideo
from videotube.models.user import User


class TestCreatePlaylist:
    @pytest.mark.asyncio
    async def test_create_trims_fields(self, db_session: AsyncSession, test_user: User):
        playlist = await create_playlist(db_session, test_user.id, "  Mix ", " tunes ")

        assert playlist.id is not None
        assert playlist.name == "Mix"
        assert playlist.description == "tunes"
        assert playlist.owner_id == test_user.id

    @pytest.mark.asyncio
    async def test_blank_fields_rejected(self, db_session: AsyncSession, test_user: User):
        with pytest.raises(ValidationError):
            await create_playlist(db_session, test_user.id, "Mix", "   ")


class TestMembershipTimestamps:
    @pytest.mark.asyncio
    async def test_add_and_remove_bump_updated_at(
        self, db_session: AsyncSession, test_user: User, make_video
    ):
        video = await make_video(test_user, "mine")
        playlist = await create_playlist(db_session, test_user.id, "Mix", "d")
        created = playlist.updated_at

        await asyncio.sleep(0.01)
        added = await add_video_to_playlist(db_session, playlist.id, video.id, test_user.id)
        await asyncio.sleep(0.01)
        removed = await remove_video_from_playlist(
            db_session, playlist.id, video.id, test_user.id
        )

        assert added.updated_at > created
        assert removed.updated_at > added.updated_at
        summary = (await get_user_playlists(db_session, test_user.id))[0]
        assert summary.updated_at == removed.updated_at

    @pytest.mark.asyncio
    async def test_noop_membership_change_keeps_updated_at(
        self, db_session: AsyncSession, test_user: User, make_video
    ):
        video = await make_video(test_user, "mine")
        playlist = await create_playlist(db_session, test_user.id, "Mix", "d")
        first = await add_video_to_playlist(db_session, playlist.id, video.id, test_user.id)

        await asyncio.sleep(0.01)
        again = await add_video_to_playlist(db_session, playlist.id, video.id, test_user.id)

        assert again.updated_at == first.updated_at
        assert again.videos == [video.id]

class TestDeletePlaylist:
    @pytest.mark.asyncio
    async def test_delete_drops_memberships(
        self, db_session: AsyncSession, test_user: User, make_video
    ):
        video = await make_video(test_user, "mine")
        playlist = await create_playlist(db_session, test_user.id, "Mix", "d")
        await add_video_to_playlist(db_session, playlist.id, video.id, test_user.id)

        await delete_playlist(db_session, playlist.id, test_user.id)

        count = await db_session.execute(select(func.count(PlaylistVideo.id)))
        assert count.scalar() == 0
        with pytest.raises(NotFound):
            await delete_playlist(db_session, playlist.id, test_user.id)

    @pytest.mark.asyncio
    async def test_non_owner_cannot_delete(
        self, db_session: AsyncSession, test_user: User, other_user: User
    ):
        playlist = await create_playlist(db_session, test_user.id, "Mix", "d")

        with pytest.raises(Unauthorized):
            await delete_playlist(db_session, playlist.id, other_user.id)


class TestVideoDeletionCascade:
    @pytest.mark.asyncio
    async def test_deleted_video_leaves_playlists(
        self, db_session: AsyncSession, test_user: User, make_video
    ):
        kept = await make_video(test_user, "kept", views=2)
        gone = await make_video(test_user, "gone", views=5)
        playlist = await create_playlist(db_session, test_user.id, "Mix", "d")
        for video in (kept, gone):
            await add_video_to_playlist(db_session, playlist.id, video.id, test_user.id)

        await delete_video(db_session, gone)

        assert await get_playlist_video_ids(db_session, playlist.id) == [kept.id]
        summaries = await get_user_playlists(db_session, test_user.id)
        assert summaries[0].total_videos == 1
        assert summaries[0].total_views == 2
