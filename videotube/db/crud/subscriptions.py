"""CRUD operations for subscriptions."""

from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.db.crud.common import get_by_id, get_many_by_ids
from videotube.db.crud.users import get_subscribed_channel_ids, get_subscriber_ids
from videotube.exceptions import NotFound, ValidationError
from videotube.models.schemas import UserSummary
from videotube.models.subscription import Subscription
from videotube.models.user import User


async def toggle_subscription(db: AsyncSession, subscriber_id: int, channel_id: int) -> bool:
    """Subscribe if not subscribed, otherwise unsubscribe.

    Returns the new state (True = subscribed).
    """
    if subscriber_id == channel_id:
        raise ValidationError("You cannot subscribe to your own channel")
    if not await get_by_id(db, User, channel_id):
        raise NotFound("Channel not found")

    result = await db.execute(
        delete(Subscription).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
    )
    if result.rowcount:
        await db.commit()
        return False

    try:
        await db.execute(
            insert(Subscription).values(subscriber_id=subscriber_id, channel_id=channel_id)
        )
        await db.commit()
    except IntegrityError:
        # A concurrent toggle subscribed first
        await db.rollback()
    return True


async def _summaries(db: AsyncSession, user_ids: list[int]) -> list[UserSummary]:
    users = await get_many_by_ids(db, User, user_ids)
    return [UserSummary.model_validate(users[i]) for i in user_ids if i in users]


async def list_channel_subscribers(db: AsyncSession, channel_id: int) -> list[UserSummary]:
    if not await get_by_id(db, User, channel_id):
        raise NotFound("Channel not found")
    return await _summaries(db, await get_subscriber_ids(db, channel_id))


async def list_subscribed_channels(db: AsyncSession, subscriber_id: int) -> list[UserSummary]:
    if not await get_by_id(db, User, subscriber_id):
        raise NotFound("Subscriber not found")
    return await _summaries(db, await get_subscribed_channel_ids(db, subscriber_id))
