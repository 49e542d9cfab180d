"""Like endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth import get_current_user
from videotube.db import get_db
from videotube.db.crud import get_liked_videos, toggle_like
from videotube.models.schemas import ApiResponse, LikeStatus, VideoWithOwner
from videotube.models.user import User

router = APIRouter()


def _status(liked: bool) -> ApiResponse:
    return ApiResponse.build(
        LikeStatus(liked=liked), "Liked successfully" if liked else "Like removed successfully"
    )


@router.post("/toggle/v/{video_id}", response_model=ApiResponse[LikeStatus])
async def toggle_video_like(
    video_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    return _status(await toggle_like(db, user.id, video_id=video_id))


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse[LikeStatus])
async def toggle_comment_like(
    comment_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    return _status(await toggle_like(db, user.id, comment_id=comment_id))


@router.post("/toggle/t/{tweet_id}", response_model=ApiResponse[LikeStatus])
async def toggle_tweet_like(
    tweet_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    return _status(await toggle_like(db, user.id, tweet_id=tweet_id))


@router.get("/videos", response_model=ApiResponse[list[VideoWithOwner]])
async def get_liked_videos_endpoint(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    videos = await get_liked_videos(db, user.id)
    return ApiResponse.build(videos, "Liked videos fetched successfully")
