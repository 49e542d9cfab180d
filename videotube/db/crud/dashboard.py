"""Channel statistics for the dashboard."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.db.crud.videos import list_channel_videos
from videotube.models.like import Like
from videotube.models.schemas import ChannelStats
from videotube.models.subscription import Subscription
from videotube.models.video import Video
from videotube.services.aggregation import build_channel_stats


async def get_channel_stats(db: AsyncSession, user_id: int) -> ChannelStats:
    """Videos, views, subscribers and likes received across the channel."""
    videos = await list_channel_videos(db, user_id)

    subscribers = await db.execute(
        select(func.count(Subscription.id)).where(Subscription.channel_id == user_id)
    )
    likes = await db.execute(
        select(func.count(Like.id))
        .join(Video, Like.video_id == Video.id)
        .where(Video.owner_id == user_id)
    )
    return build_channel_stats(videos, subscribers.scalar() or 0, likes.scalar() or 0)
