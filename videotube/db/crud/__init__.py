"""CRUD operations module."""

from videotube.db.crud.comments import (
    add_comment,
    delete_comment,
    list_video_comments,
    update_comment,
)
from videotube.db.crud.dashboard import get_channel_stats
from videotube.db.crud.likes import get_liked_videos, toggle_like
from videotube.db.crud.playlists import (
    add_video_to_playlist,
    create_playlist,
    delete_playlist,
    get_playlist_detail,
    get_user_playlists,
    read_playlist,
    remove_video_from_playlist,
    update_playlist,
)
from videotube.db.crud.subscriptions import (
    list_channel_subscribers,
    list_subscribed_channels,
    toggle_subscription,
)
from videotube.db.crud.tweets import (
    create_tweet,
    delete_tweet,
    list_user_tweets,
    update_tweet,
)
from videotube.db.crud.users import (
    create_user,
    ensure_available,
    get_channel_profile,
    get_user,
    get_user_by_identifier,
    get_watch_history,
    update_account,
    update_avatar,
    update_cover_image,
    update_password_hash,
)
from videotube.db.crud.videos import (
    create_video,
    delete_video,
    get_owned_video,
    get_video_detail,
    list_channel_videos,
    list_videos,
    toggle_publish_status,
    update_video,
)

__all__ = [
    "add_comment",
    "add_video_to_playlist",
    "create_playlist",
    "create_tweet",
    "create_user",
    "create_video",
    "delete_comment",
    "delete_playlist",
    "delete_tweet",
    "delete_video",
    "ensure_available",
    "get_channel_profile",
    "get_channel_stats",
    "get_liked_videos",
    "get_owned_video",
    "get_playlist_detail",
    "get_user",
    "get_user_by_identifier",
    "get_user_playlists",
    "get_video_detail",
    "get_watch_history",
    "list_channel_subscribers",
    "list_channel_videos",
    "list_subscribed_channels",
    "list_user_tweets",
    "list_video_comments",
    "list_videos",
    "read_playlist",
    "remove_video_from_playlist",
    "toggle_like",
    "toggle_publish_status",
    "toggle_subscription",
    "update_account",
    "update_avatar",
    "update_comment",
    "update_cover_image",
    "update_password_hash",
    "update_playlist",
    "update_tweet",
    "update_video",
]
