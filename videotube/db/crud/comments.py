"""CRUD operations for comments."""

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth.permissions import ensure_owner
from videotube.db.crud.common import fresh, get_by_id, get_many_by_ids, require_content
from videotube.db.crud.likes import count_likes
from videotube.exceptions import NotFound
from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.schemas import CommentRead
from videotube.models.user import User
from videotube.models.video import Video
from videotube.services.aggregation import owner_summary
from videotube.utils.pagination import page_offset


async def _read(db: AsyncSession, comments: list[Comment]) -> list[CommentRead]:
    owners = await get_many_by_ids(db, User, (c.owner_id for c in comments))
    likes = await count_likes(db, Like.comment_id, [c.id for c in comments])
    return [
        CommentRead(
            id=comment.id,
            content=comment.content,
            video_id=comment.video_id,
            owner_id=comment.owner_id,
            owner=owner_summary(owners.get(comment.owner_id)),
            likes_count=likes.get(comment.id, 0),
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )
        for comment in comments
    ]

async def list_video_comments(
    db: AsyncSession, video_id: int, page: int = 1, limit: int = 10
) -> tuple[list[CommentRead], int]:
    """Comments on a video, newest first."""
    if not await get_by_id(db, Video, video_id):
        raise NotFound("Video not found")

    total_result = await db.execute(
        select(func.count(Comment.id)).where(Comment.video_id == video_id)
    )
    total = total_result.scalar() or 0

    result = await db.execute(
        fresh(
            select(Comment)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
    )
    return await _read(db, list(result.scalars().all())), total

async def add_comment(
    db: AsyncSession, video_id: int, owner_id: int, content: str | None
) -> CommentRead:
    content = require_content(content)
    if not await get_by_id(db, Video, video_id):
        raise NotFound("Video not found")

    comment = Comment(content=content, video_id=video_id, owner_id=owner_id)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return (await _read(db, [comment]))[0]

async def get_owned_comment(db: AsyncSession, comment_id: int, acting_id: int) -> Comment:
    comment = await get_by_id(db, Comment, comment_id)
    if not comment:
        raise NotFound("Comment not found")
    ensure_owner(acting_id, comment.owner_id, "Only the comment owner can modify it")
    return comment

async def update_comment(
    db: AsyncSession, comment_id: int, acting_id: int, content: str | None
) -> CommentRead:
    content = require_content(content)
    await get_owned_comment(db, comment_id, acting_id)

    await db.execute(
        update(Comment)
        .where(Comment.id == comment_id)
        .values(content=content)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    comment = await get_by_id(db, Comment, comment_id)
    return (await _read(db, [comment]))[0]

async def delete_comment(db: AsyncSession, comment_id: int, acting_id: int) -> None:
    await get_owned_comment(db, comment_id, acting_id)
    await db.execute(delete(Like).where(Like.comment_id == comment_id))
    await db.execute(delete(Comment).where(Comment.id == comment_id))
    await db.commit()
