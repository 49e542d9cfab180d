"""CRUD operations and aggregated views for playlists."""

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, exists, insert, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth.permissions import ensure_owner
from videotube.db.crud.common import fresh, get_by_id, get_many_by_ids, require_text
from videotube.exceptions import InternalFailure, NotFound, ValidationError
from videotube.models.base import utcnow
from videotube.models.playlist import Playlist, PlaylistVideo
from videotube.models.schemas import PlaylistDetail, PlaylistRead, PlaylistSummary
from videotube.models.user import User
from videotube.models.video import Video
from videotube.services.aggregation import (
    build_playlist_detail,
    playlist_with_videos,
    summarize_playlists,
)


def _require_fields(name: str | None, description: str | None) -> tuple[str, str]:
    name, description = require_text(name), require_text(description)
    if not name or not description:
        raise ValidationError("name and description both are required")
    return name, description


async def get_playlist(db: AsyncSession, playlist_id: int) -> Playlist | None:
    return await get_by_id(db, Playlist, playlist_id)


async def get_existing_playlist(db: AsyncSession, playlist_id: int) -> Playlist:
    playlist = await get_playlist(db, playlist_id)
    if not playlist:
        raise NotFound("Playlist not found")
    return playlist


async def get_playlist_video_ids(db: AsyncSession, playlist_id: int) -> list[int]:
    """Video ids of a playlist in insertion order."""
    result = await db.execute(
        select(PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id == playlist_id)
        .order_by(PlaylistVideo.id)
    )
    return list(result.scalars().all())


async def get_memberships(
    db: AsyncSession, playlist_ids: Sequence[int]
) -> dict[int, list[int]]:
    """Ordered video ids for many playlists in one query."""
    memberships: dict[int, list[int]] = defaultdict(list)
    if not playlist_ids:
        return memberships
    result = await db.execute(
        select(PlaylistVideo.playlist_id, PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id.in_(playlist_ids))
        .order_by(PlaylistVideo.id)
    )
    for playlist_id, video_id in result.all():
        memberships[playlist_id].append(video_id)
    return memberships


async def read_playlist(db: AsyncSession, playlist: Playlist) -> PlaylistRead:
    return playlist_with_videos(playlist, await get_playlist_video_ids(db, playlist.id))


async def create_playlist(
    db: AsyncSession,
    owner_id: int,
    name: str | None,
    description: str | None,
) -> Playlist:
    """Create an empty playlist owned by ``owner_id``."""
    name, description = _require_fields(name, description)

    playlist = Playlist(name=name, description=description, owner_id=owner_id)
    db.add(playlist)
    await db.commit()
    await db.refresh(playlist)
    if playlist.id is None:
        raise InternalFailure("failed to create playlist")
    return playlist


async def _touch(db: AsyncSession, playlist_id: int) -> None:
    """Bump updated_at after a membership change, in the caller's transaction."""
    await db.execute(
        update(Playlist)
        .where(Playlist.id == playlist_id)
        .values(updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )


async def _get_owned_pair(
    db: AsyncSession, playlist_id: int, video_id: int, acting_id: int, action: str
) -> Playlist:
    """Load playlist and video, then require the actor to own both."""
    playlist = await get_existing_playlist(db, playlist_id)
    video = await get_by_id(db, Video, video_id)
    if not video:
        raise NotFound("Video not found")

    message = f"Only the owner can {action} their playlist"
    ensure_owner(acting_id, playlist.owner_id, message)
    ensure_owner(acting_id, video.owner_id, message)
    return playlist


async def add_video_to_playlist(
    db: AsyncSession, playlist_id: int, video_id: int, acting_id: int
) -> PlaylistRead:
    """Add a video to a playlist. Adding a video already present is a no-op."""
    playlist = await _get_owned_pair(db, playlist_id, video_id, acting_id, "add a video to")

    already_member = exists().where(
        PlaylistVideo.playlist_id == playlist_id,
        PlaylistVideo.video_id == video_id,
    )
    try:
        result = await db.execute(
            insert(PlaylistVideo).from_select(
                ["playlist_id", "video_id"],
                select(literal(playlist_id), literal(video_id)).where(~already_member),
            )
        )
        if result.rowcount:
            await _touch(db, playlist_id)
        await db.commit()
    except IntegrityError:
        # Concurrent add of the same pair; membership holds either way
        await db.rollback()

    return await read_playlist(db, await get_existing_playlist(db, playlist.id))


async def remove_video_from_playlist(
    db: AsyncSession, playlist_id: int, video_id: int, acting_id: int
) -> PlaylistRead:
    """Remove a video from a playlist. Removing an absent video is a no-op."""
    playlist = await _get_owned_pair(
        db, playlist_id, video_id, acting_id, "remove a video from"
    )

    result = await db.execute(
        delete(PlaylistVideo).where(
            PlaylistVideo.playlist_id == playlist_id,
            PlaylistVideo.video_id == video_id,
        )
    )
    if result.rowcount:
        await _touch(db, playlist_id)
    await db.commit()

    return await read_playlist(db, await get_existing_playlist(db, playlist.id))


async def update_playlist(
    db: AsyncSession,
    playlist_id: int,
    name: str | None,
    description: str | None,
    acting_id: int,
) -> PlaylistRead:
    name, description = _require_fields(name, description)
    playlist = await get_existing_playlist(db, playlist_id)
    ensure_owner(acting_id, playlist.owner_id, "Only the owner can edit the playlist")

    await db.execute(
        update(Playlist)
        .where(Playlist.id == playlist_id)
        .values(name=name, description=description)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    updated = await get_existing_playlist(db, playlist_id)
    return await read_playlist(db, updated)


async def delete_playlist(db: AsyncSession, playlist_id: int, acting_id: int) -> None:
    playlist = await get_existing_playlist(db, playlist_id)
    ensure_owner(acting_id, playlist.owner_id, "Only the owner can delete the playlist")

    await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
    result = await db.execute(delete(Playlist).where(Playlist.id == playlist_id))
    if result.rowcount == 0:
        await db.rollback()
        raise InternalFailure("Something went wrong while deleting playlist")
    await db.commit()


async def get_playlist_detail(db: AsyncSession, playlist_id: int) -> PlaylistDetail | None:
    """Playlist with its published videos and owner.

    Raises NotFound for an unknown playlist; returns None when the playlist
    exists but has no published videos.
    """
    playlist = await get_existing_playlist(db, playlist_id)
    video_ids = await get_playlist_video_ids(db, playlist_id)
    videos = await get_many_by_ids(db, Video, video_ids)
    owner = await get_by_id(db, User, playlist.owner_id)
    return build_playlist_detail(playlist, video_ids, videos, owner)


async def get_user_playlists(db: AsyncSession, user_id: int) -> list[PlaylistSummary]:
    """All playlists of a user with video counts and total views."""
    result = await db.execute(
        fresh(select(Playlist).where(Playlist.owner_id == user_id).order_by(Playlist.id))
    )
    playlists = result.scalars().all()

    memberships = await get_memberships(db, [p.id for p in playlists])
    all_video_ids = [vid for ids in memberships.values() for vid in ids]
    videos = await get_many_by_ids(db, Video, all_video_ids)
    return summarize_playlists(playlists, memberships, videos)
