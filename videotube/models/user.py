"""User model and watch history."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from videotube.models.base import Base, TimestampMixin, utcnow


class User(Base, TimestampMixin):
    """A registered account. Also a channel when viewed as a subscription target."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Stored lowercased and trimmed so lookups are case-insensitive
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(255), index=True)

    # Content store references (url + deletion id)
    avatar_url: Mapped[str] = mapped_column(String(2000))
    avatar_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    cover_image_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    password_hash: Mapped[str] = mapped_column(String(255))
    # NULL while logged out; otherwise the most recently issued refresh token
    refresh_token: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


class WatchHistoryEntry(Base):
    """One video in a user's watch history; ``id`` gives first-watch order."""

    __tablename__ = "watch_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    video_id: Mapped[int] = mapped_column(ForeignKey("videos.id", ondelete="CASCADE"))
    watched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_watch_history_user_video"),)
