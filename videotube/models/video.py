"""Video model."""

from sqlalchemy import Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from videotube.models.base import Base, TimestampMixin


class Video(Base, TimestampMixin):
    """Uploaded video. ``owner_id`` never changes after creation."""

    __tablename__ = "videos"

    id: Mapped[int] = mapped_column(primary_key=True)
    video_file_url: Mapped[str] = mapped_column(String(2000))
    video_file_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    thumbnail_url: Mapped[str] = mapped_column(String(2000))
    thumbnail_public_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    duration: Mapped[float] = mapped_column(Float, default=0.0)  # seconds
    views: Mapped[int] = mapped_column(default=0)
    is_published: Mapped[bool] = mapped_column(default=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    __table_args__ = (Index("ix_videos_published_created", "is_published", "created_at"),)

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title={self.title})>"
