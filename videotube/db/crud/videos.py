"""CRUD operations for videos."""

from collections.abc import Sequence

from sqlalchemy import delete, func, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth.permissions import authorize, ensure_owner
from videotube.constants import DEFAULT_SORT_FIELD, MAX_TITLE_LENGTH, VALID_VIDEO_SORT_FIELDS
from videotube.db.crud.common import fresh, get_by_id, get_many_by_ids, require_text
from videotube.db.crud.users import add_to_watch_history, get_subscriber_ids
from videotube.exceptions import NotFound, ValidationError
from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.playlist import PlaylistVideo
from videotube.models.schemas import VideoDetail, VideoWithOwner
from videotube.models.user import User, WatchHistoryEntry
from videotube.models.video import Video
from videotube.services.aggregation import attach_owners, build_video_detail
from videotube.services.storage import UploadedAsset
from videotube.utils.pagination import page_offset


def _require_details(title: str | None, description: str | None) -> tuple[str, str]:
    title, description = require_text(title), require_text(description)
    if not title or not description:
        raise ValidationError("Title and description are required")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
    return title, description


async def get_video(db: AsyncSession, video_id: int) -> Video | None:
    return await get_by_id(db, Video, video_id)


async def get_visible_video(db: AsyncSession, video_id: int, acting_id: int | None) -> Video:
    """Video by id; unpublished videos are visible to their owner only."""
    video = await get_video(db, video_id)
    if not video or (not video.is_published and not authorize(acting_id, video.owner_id)):
        raise NotFound("Video not found")
    return video


async def get_owned_video(db: AsyncSession, video_id: int, acting_id: int) -> Video:
    """Video by id, requiring the actor to own it."""
    video = await get_video(db, video_id)
    if not video:
        raise NotFound("Video not found")
    ensure_owner(acting_id, video.owner_id, "You are not allowed to modify this video")
    return video


async def with_owners(db: AsyncSession, videos: Sequence[Video]) -> list[VideoWithOwner]:
    owners = await get_many_by_ids(db, User, (v.owner_id for v in videos))
    return attach_owners(videos, owners)


async def list_videos(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    query: str | None = None,
    sort_by: str = DEFAULT_SORT_FIELD,
    sort_type: str = "desc",
    user_id: int | None = None,
) -> tuple[list[VideoWithOwner], int]:
    """Published videos, optionally searched and filtered by owner."""
    conditions = [Video.is_published.is_(True)]
    if query:
        pattern = f"%{query}%"
        conditions.append(or_(Video.title.ilike(pattern), Video.description.ilike(pattern)))
    if user_id is not None:
        conditions.append(Video.owner_id == user_id)

    sort_column = getattr(
        Video, sort_by if sort_by in VALID_VIDEO_SORT_FIELDS else DEFAULT_SORT_FIELD
    )
    if sort_type == "asc":
        order = (sort_column.asc(), Video.id.asc())
    else:
        order = (sort_column.desc(), Video.id.desc())

    total_result = await db.execute(select(func.count(Video.id)).where(*conditions))
    total = total_result.scalar() or 0

    result = await db.execute(
        fresh(
            select(Video)
            .where(*conditions)
            .order_by(*order)
            .offset(page_offset(page, limit))
            .limit(limit)
        )
    )
    videos = result.scalars().all()
    return await with_owners(db, videos), total


async def create_video(
    db: AsyncSession,
    owner_id: int,
    title: str | None,
    description: str | None,
    video_file: UploadedAsset,
    thumbnail: UploadedAsset,
) -> Video:
    title, description = _require_details(title, description)

    video = Video(
        video_file_url=video_file.url,
        video_file_public_id=video_file.public_id,
        thumbnail_url=thumbnail.url,
        thumbnail_public_id=thumbnail.public_id,
        title=title,
        description=description,
        duration=video_file.duration or 0.0,
        owner_id=owner_id,
    )
    db.add(video)
    await db.commit()
    await db.refresh(video)
    return video


async def increment_views(db: AsyncSession, video_id: int) -> None:
    await db.execute(
        update(Video)
        .where(Video.id == video_id)
        .values(views=Video.views + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()


async def get_video_detail(
    db: AsyncSession, video_id: int, acting_id: int | None
) -> VideoDetail:
    """Watch-page view of a video.

    Counts the view and, for a signed-in viewer, records it in their watch
    history before building the view.
    """
    video = await get_visible_video(db, video_id, acting_id)

    await increment_views(db, video.id)
    if acting_id is not None:
        await add_to_watch_history(db, acting_id, video.id)

    video = await get_visible_video(db, video_id, acting_id)
    owner = await get_by_id(db, User, video.owner_id)
    subscriber_ids = await get_subscriber_ids(db, video.owner_id)
    likers = await db.execute(select(Like.liked_by_id).where(Like.video_id == video.id))
    return build_video_detail(
        video, owner, subscriber_ids, list(likers.scalars().all()), acting_id
    )


async def update_video(
    db: AsyncSession,
    video: Video,
    title: str | None,
    description: str | None,
    thumbnail: UploadedAsset | None = None,
) -> Video:
    """Update title/description and optionally swap the thumbnail."""
    title, description = _require_details(title, description)

    values: dict[str, object] = {"title": title, "description": description}
    if thumbnail is not None:
        values["thumbnail_url"] = thumbnail.url
        values["thumbnail_public_id"] = thumbnail.public_id

    await db.execute(
        update(Video)
        .where(Video.id == video.id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    updated = await get_video(db, video.id)
    if not updated:
        raise NotFound("Video not found")
    return updated


async def toggle_publish_status(db: AsyncSession, video: Video) -> Video:
    await db.execute(
        update(Video)
        .where(Video.id == video.id)
        .values(is_published=not_(Video.is_published))
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    updated = await get_video(db, video.id)
    if not updated:
        raise NotFound("Video not found")
    return updated


async def delete_video(db: AsyncSession, video: Video) -> None:
    """Delete a video and every reference to it in one transaction."""
    comment_ids = select(Comment.id).where(Comment.video_id == video.id)

    await db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id == video.id))
    await db.execute(delete(WatchHistoryEntry).where(WatchHistoryEntry.video_id == video.id))
    await db.execute(
        delete(Like)
        .where(or_(Like.video_id == video.id, Like.comment_id.in_(comment_ids)))
        .execution_options(synchronize_session=False)
    )
    await db.execute(delete(Comment).where(Comment.video_id == video.id))
    await db.execute(delete(Video).where(Video.id == video.id))
    await db.commit()


async def list_channel_videos(db: AsyncSession, owner_id: int) -> list[Video]:
    """Every video of a channel, published or not, newest first."""
    result = await db.execute(
        fresh(
            select(Video)
            .where(Video.owner_id == owner_id)
            .order_by(Video.created_at.desc(), Video.id.desc())
        )
    )
    return list(result.scalars().all())
