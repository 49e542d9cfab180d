"""SQLAlchemy models."""

from videotube.models.base import Base
from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.playlist import Playlist, PlaylistVideo
from videotube.models.subscription import Subscription
from videotube.models.tweet import Tweet
from videotube.models.user import User, WatchHistoryEntry
from videotube.models.video import Video

__all__ = [
    "Base",
    "User",
    "WatchHistoryEntry",
    "Video",
    "Playlist",
    "PlaylistVideo",
    "Subscription",
    "Like",
    "Comment",
    "Tweet",
]
