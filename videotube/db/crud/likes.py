"""CRUD operations for likes on videos, comments and tweets."""

from collections.abc import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from videotube.db.crud.common import fresh, get_by_id
from videotube.db.crud.videos import with_owners
from videotube.exceptions import NotFound, ValidationError
from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.schemas import VideoWithOwner
from videotube.models.tweet import Tweet
from videotube.models.video import Video

_TARGETS = {
    "video_id": (Video, "Video not found"),
    "comment_id": (Comment, "Comment not found"),
    "tweet_id": (Tweet, "Tweet not found"),
}


async def toggle_like(
    db: AsyncSession,
    user_id: int,
    *,
    video_id: int | None = None,
    comment_id: int | None = None,
    tweet_id: int | None = None,
) -> bool:
    """Like the target if not liked yet, otherwise remove the like.

    Exactly one target must be given. Returns the new state (True = liked).
    """
    given = {
        column: value
        for column, value in {
            "video_id": video_id,
            "comment_id": comment_id,
            "tweet_id": tweet_id,
        }.items()
        if value is not None
    }
    if len(given) != 1:
        raise ValidationError("Exactly one like target is required")

    (column, target_id), = given.items()
    model, missing_message = _TARGETS[column]
    if not await get_by_id(db, model, target_id):
        raise NotFound(missing_message)

    result = await db.execute(
        delete(Like).where(getattr(Like, column) == target_id, Like.liked_by_id == user_id)
    )
    if result.rowcount:
        await db.commit()
        return False

    try:
        await db.execute(insert(Like).values(liked_by_id=user_id, **given))
        await db.commit()
    except IntegrityError:
        await db.rollback()
    return True


async def count_likes(
    db: AsyncSession, column: InstrumentedAttribute, ids: Sequence[int]
) -> dict[int, int]:
    """Like counts per target id for one target column, in one query."""
    if not ids:
        return {}
    result = await db.execute(
        select(column, func.count(Like.id)).where(column.in_(ids)).group_by(column)
    )
    return {target_id: count for target_id, count in result.all()}


async def get_liked_videos(db: AsyncSession, user_id: int) -> list[VideoWithOwner]:
    """Published videos the user liked, most recent like first."""
    result = await db.execute(
        fresh(
            select(Video)
            .join(Like, Like.video_id == Video.id)
            .where(Like.liked_by_id == user_id, Video.is_published.is_(True))
            .order_by(Like.id.desc())
        )
    )
    return await with_owners(db, result.scalars().all())
