"""Pydantic schemas for API validation and serialization.

JSON keys are camelCase on the wire; request bodies accept either camelCase
or snake_case.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, readable from ORM attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope shared by every endpoint."""

    status_code: int = 200
    data: DataT | None = None
    message: str = "Success"
    success: bool = True

    @classmethod
    def build(
        cls, data: Any = None, message: str = "Success", status_code: int = 200
    ) -> "ApiResponse":
        return cls(
            status_code=status_code,
            data=data,
            message=message,
            success=status_code < 400,
        )


# User schemas
class UserRead(CamelModel):
    """Public projection of a user (no password hash, no refresh token)."""

    id: int
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class OwnerSummary(CamelModel):
    """Owner fields embedded in aggregated views."""

    username: str
    full_name: str
    avatar_url: str


class UserSummary(OwnerSummary):
    id: int


class LoginRequest(CamelModel):
    """Either username or email identifies the account."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginData(CamelModel):
    user: UserRead
    access_token: str
    refresh_token: str


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class ChangePasswordRequest(CamelModel):
    old_password: str | None = None
    new_password: str | None = None


class AccountUpdate(CamelModel):
    full_name: str | None = None
    email: str | None = None


class ChannelProfile(CamelModel):
    """Channel page for a user, with subscription counts."""

    id: int
    username: str
    full_name: str
    email: str
    avatar_url: str
    cover_image_url: str | None = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


# Video schemas
class VideoRead(CamelModel):
    id: int
    video_file_url: str
    thumbnail_url: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner_id: int
    created_at: datetime
    updated_at: datetime


class VideoWithOwner(VideoRead):
    owner: OwnerSummary | None = None


class ChannelSummary(OwnerSummary):
    """Video owner as shown on the watch page."""

    id: int
    subscribers_count: int
    is_subscribed: bool


class VideoDetail(VideoRead):
    owner: ChannelSummary | None = None
    likes_count: int
    is_liked: bool


class VideoUpdate(CamelModel):
    title: str | None = None
    description: str | None = None


class VideoPage(CamelModel):
    """Paginated video list."""

    items: list[VideoWithOwner]
    total: int
    page: int
    limit: int
    pages: int


# Playlist schemas
class PlaylistCreate(CamelModel):
    name: str | None = None
    description: str | None = None


class PlaylistUpdate(PlaylistCreate):
    pass


class PlaylistRead(CamelModel):
    """Raw playlist with its ordered video ids."""

    id: int
    name: str
    description: str
    owner_id: int
    videos: list[int]
    created_at: datetime
    updated_at: datetime


class PlaylistSummary(CamelModel):
    id: int
    name: str
    description: str
    total_videos: int
    total_views: int
    updated_at: datetime


class PlaylistVideoItem(CamelModel):
    id: int
    video_file_url: str
    thumbnail_url: str
    title: str
    description: str
    duration: float
    created_at: datetime
    views: int


class PlaylistDetail(CamelModel):
    id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    total_videos: int
    total_views: int
    videos: list[PlaylistVideoItem]
    owner: OwnerSummary | None = None


# Subscription and like schemas
class SubscriptionStatus(CamelModel):
    subscribed: bool


class LikeStatus(CamelModel):
    liked: bool


# Comment schemas
class CommentCreate(CamelModel):
    content: str | None = None


class CommentRead(CamelModel):
    id: int
    content: str
    video_id: int
    owner_id: int
    owner: OwnerSummary | None = None
    likes_count: int = 0
    created_at: datetime
    updated_at: datetime


class CommentPage(CamelModel):
    items: list[CommentRead]
    total: int
    page: int
    limit: int
    pages: int


# Tweet schemas
class TweetCreate(CamelModel):
    content: str | None = None


class TweetRead(CamelModel):
    id: int
    content: str
    owner_id: int
    owner: OwnerSummary | None = None
    likes_count: int = 0
    created_at: datetime
    updated_at: datetime


# Dashboard
class ChannelStats(CamelModel):
    total_videos: int
    total_views: int
    total_subscribers: int
    total_likes: int


# Health
class HealthStatus(BaseModel):
    status: str
    timestamp: str
    uptime_seconds: float
    version: str
    checks: dict[str, dict[str, str]]
