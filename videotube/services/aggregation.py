"""Read-side view folds.

Each function here is a pure transformation over records that the CRUD layer
has already fetched in batches (one query per collection, never one per
item). Nothing in this module touches the database, so the folds can be
exercised with plain ORM instances built in memory.

References are resolved in the order given; a reference whose record is
missing (deleted since it was stored) is skipped.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TypeVar

from videotube.models.playlist import Playlist
from videotube.models.user import User
from videotube.models.video import Video
from videotube.models.schemas import (
    ChannelProfile,
    ChannelStats,
    ChannelSummary,
    OwnerSummary,
    PlaylistDetail,
    PlaylistRead,
    PlaylistSummary,
    PlaylistVideoItem,
    VideoDetail,
    VideoRead,
    VideoWithOwner,
)

T = TypeVar("T")


def first(items: Iterable[T], predicate: Callable[[T], bool] | None = None) -> T | None:
    """Return the first item (matching ``predicate`` if given) or None."""
    for item in items:
        if predicate is None or predicate(item):
            return item
    return None


def resolve(ids: Sequence[int], records: Mapping[int, T]) -> list[T]:
    """Look up ``ids`` in ``records``, keeping order and dropping dangling ids."""
    return [records[i] for i in ids if i in records]


def owner_summary(user: User | None) -> OwnerSummary | None:
    if user is None:
        return None
    return OwnerSummary(
        username=user.username,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
    )


def total_views(videos: Iterable[Video]) -> int:
    return sum(video.views or 0 for video in videos)


def build_channel_profile(
    channel: User,
    subscriber_ids: Sequence[int],
    subscribed_to_ids: Sequence[int],
    requester_id: int | None,
) -> ChannelProfile:
    """Fold both sides of the subscription graph around ``channel``.

    ``subscriber_ids`` are users subscribed to the channel;
    ``subscribed_to_ids`` are channels the user subscribes to.
    """
    return ChannelProfile(
        id=channel.id,
        username=channel.username,
        full_name=channel.full_name,
        email=channel.email,
        avatar_url=channel.avatar_url,
        cover_image_url=channel.cover_image_url,
        subscribers_count=len(subscriber_ids),
        channels_subscribed_to_count=len(subscribed_to_ids),
        is_subscribed=requester_id is not None and requester_id in set(subscriber_ids),
    )


def playlist_with_videos(playlist: Playlist, video_ids: Sequence[int]) -> PlaylistRead:
    return PlaylistRead(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner_id=playlist.owner_id,
        videos=list(video_ids),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


def summarize_playlists(
    playlists: Sequence[Playlist],
    memberships: Mapping[int, Sequence[int]],
    videos: Mapping[int, Video],
) -> list[PlaylistSummary]:
    """Per playlist: number of videos and the sum of their views."""
    summaries = []
    for playlist in playlists:
        joined = resolve(memberships.get(playlist.id, []), videos)
        summaries.append(
            PlaylistSummary(
                id=playlist.id,
                name=playlist.name,
                description=playlist.description,
                total_videos=len(joined),
                total_views=total_views(joined),
                updated_at=playlist.updated_at,
            )
        )
    return summaries


def build_playlist_detail(
    playlist: Playlist,
    video_ids: Sequence[int],
    videos: Mapping[int, Video],
    owner: User | None,
) -> PlaylistDetail | None:
    """Published videos of the playlist with totals and the owner.

    Returns None when no published video remains after filtering; callers
    report that as an empty payload rather than a 404.
    """
    published = [video for video in resolve(video_ids, videos) if video.is_published]
    if not published:
        return None

    return PlaylistDetail(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        total_videos=len(published),
        total_views=total_views(published),
        videos=[PlaylistVideoItem.model_validate(video) for video in published],
        owner=owner_summary(owner),
    )


def attach_owners(
    videos: Iterable[Video], owners: Mapping[int, User]
) -> list[VideoWithOwner]:
    """Embed each video's owner summary."""
    return [
        VideoWithOwner(
            **VideoRead.model_validate(video).model_dump(),
            owner=owner_summary(owners.get(video.owner_id)),
        )
        for video in videos
    ]


def build_watch_history(
    video_ids: Sequence[int],
    videos: Mapping[int, Video],
    owners: Sequence[User],
) -> list[VideoWithOwner]:
    """Watched videos in first-watch order, each with a single owner."""
    history = []
    for video in resolve(video_ids, videos):
        owner = first(owners, lambda user, owner_id=video.owner_id: user.id == owner_id)
        history.append(
            VideoWithOwner(
                **VideoRead.model_validate(video).model_dump(),
                owner=owner_summary(owner),
            )
        )
    return history


def build_video_detail(
    video: Video,
    owner: User | None,
    owner_subscriber_ids: Sequence[int],
    liker_ids: Sequence[int],
    requester_id: int | None,
) -> VideoDetail:
    channel = None
    if owner is not None:
        channel = ChannelSummary(
            id=owner.id,
            username=owner.username,
            full_name=owner.full_name,
            avatar_url=owner.avatar_url,
            subscribers_count=len(owner_subscriber_ids),
            is_subscribed=requester_id is not None and requester_id in set(owner_subscriber_ids),
        )
    return VideoDetail(
        **VideoRead.model_validate(video).model_dump(),
        owner=channel,
        likes_count=len(liker_ids),
        is_liked=requester_id is not None and requester_id in set(liker_ids),
    )


def build_channel_stats(
    videos: Sequence[Video], subscriber_count: int, like_count: int
) -> ChannelStats:
    return ChannelStats(
        total_videos=len(videos),
        total_views=total_views(videos),
        total_subscribers=subscriber_count,
        total_likes=like_count,
    )
