"""Channel dashboard endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth import get_current_user
from videotube.db import get_db
from videotube.db.crud import get_channel_stats, list_channel_videos
from videotube.models.schemas import ApiResponse, ChannelStats, VideoRead
from videotube.models.user import User

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[ChannelStats])
async def get_stats(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """Totals for the signed-in user's channel."""
    stats = await get_channel_stats(db, user.id)
    return ApiResponse.build(stats, "Channel stats fetched successfully")


@router.get("/videos", response_model=ApiResponse[list[VideoRead]])
async def get_channel_videos(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """Every video of the signed-in user, published or not."""
    videos = await list_channel_videos(db, user.id)
    return ApiResponse.build(
        [VideoRead.model_validate(video) for video in videos],
        "Channel videos fetched successfully",
    )
