"""Subscription edge between two users."""

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from videotube.models.base import Base, TimestampMixin


class Subscription(Base, TimestampMixin):
    """``subscriber_id`` follows the channel ``channel_id``."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    subscriber_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    channel_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
    )

    def __repr__(self) -> str:
        return f"<Subscription(subscriber={self.subscriber_id}, channel={self.channel_id})>"
