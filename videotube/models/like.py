"""Like on a video, comment or tweet."""

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from videotube.models.base import Base, TimestampMixin


class Like(Base, TimestampMixin):
    """Exactly one of video_id / comment_id / tweet_id is set."""

    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(primary_key=True)
    liked_by_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    video_id: Mapped[int | None] = mapped_column(
        ForeignKey("videos.id", ondelete="CASCADE"), nullable=True, index=True
    )
    comment_id: Mapped[int | None] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    tweet_id: Mapped[int | None] = mapped_column(
        ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True, index=True
    )

    __table_args__ = (
        UniqueConstraint("video_id", "liked_by_id", name="uq_like_video"),
        UniqueConstraint("comment_id", "liked_by_id", name="uq_like_comment"),
        UniqueConstraint("tweet_id", "liked_by_id", name="uq_like_tweet"),
        CheckConstraint(
            "(video_id IS NOT NULL AND comment_id IS NULL AND tweet_id IS NULL)"
            " OR (video_id IS NULL AND comment_id IS NOT NULL AND tweet_id IS NULL)"
            " OR (video_id IS NULL AND comment_id IS NULL AND tweet_id IS NOT NULL)",
            name="ck_like_single_target",
        ),
    )
