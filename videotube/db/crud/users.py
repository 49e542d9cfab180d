"""CRUD operations for users, sessions and watch history."""

from sqlalchemy import DateTime, exists, insert, literal, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.db.crud.common import fresh, get_by_id, get_many_by_ids, require_text
from videotube.exceptions import Conflict, NotFound, ValidationError
from videotube.models.base import utcnow
from videotube.models.schemas import ChannelProfile, VideoWithOwner
from videotube.models.subscription import Subscription
from videotube.models.user import User, WatchHistoryEntry
from videotube.models.video import Video
from videotube.services.aggregation import build_channel_profile, build_watch_history
from videotube.services.storage import UploadedAsset


def normalize_handle(value: str) -> str:
    """Usernames and emails are stored trimmed and lowercased."""
    return value.strip().lower()


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await get_by_id(db, User, user_id)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(
        fresh(select(User).where(User.username == normalize_handle(username)))
    )
    return result.scalar_one_or_none()


async def get_user_by_identifier(db: AsyncSession, identifier: str) -> User | None:
    """Find a user by username or email."""
    handle = normalize_handle(identifier)
    result = await db.execute(
        fresh(select(User).where(or_(User.username == handle, User.email == handle)))
    )
    return result.scalars().first()


async def ensure_available(
    db: AsyncSession,
    username: str | None = None,
    email: str | None = None,
    exclude_user_id: int | None = None,
) -> None:
    """Raise Conflict if the username or email already belongs to someone."""
    conditions = []
    if username:
        conditions.append(User.username == normalize_handle(username))
    if email:
        conditions.append(User.email == normalize_handle(email))
    if not conditions:
        return

    query = select(User.id).where(or_(*conditions))
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise Conflict("User with email or username already exists")


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    full_name: str,
    password_hash: str,
    avatar: UploadedAsset,
    cover_image: UploadedAsset | None = None,
) -> User:
    """Insert a new user. Duplicate username or email raises Conflict."""
    await ensure_available(db, username=username, email=email)

    user = User(
        username=normalize_handle(username),
        email=normalize_handle(email),
        full_name=full_name.strip(),
        avatar_url=avatar.url,
        avatar_public_id=avatar.public_id,
        cover_image_url=cover_image.url if cover_image else None,
        cover_image_public_id=cover_image.public_id if cover_image else None,
        password_hash=password_hash,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise Conflict("User with email or username already exists") from e

    await db.refresh(user)
    return user


async def set_refresh_token(db: AsyncSession, user_id: int, token: str | None) -> None:
    """Persist (or clear, with None) the user's current refresh token."""
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(refresh_token=token)
        .execution_options(synchronize_session=False)
    )
    await db.commit()


async def rotate_refresh_token(
    db: AsyncSession, user_id: int, expected: str, new_token: str
) -> bool:
    """Swap the stored refresh token only if it still equals ``expected``.

    Returns False when another request rotated it first.
    """
    result = await db.execute(
        update(User)
        .where(User.id == user_id, User.refresh_token == expected)
        .values(refresh_token=new_token)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount == 1


async def update_password_hash(db: AsyncSession, user_id: int, password_hash: str) -> None:
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(password_hash=password_hash)
        .execution_options(synchronize_session=False)
    )
    await db.commit()


async def update_account(
    db: AsyncSession, user_id: int, full_name: str | None, email: str | None
) -> User:
    """Update display name and email; both are required."""
    full_name, email = require_text(full_name), require_text(email)
    if not full_name or not email:
        raise ValidationError("All fields are required")

    await ensure_available(db, email=email, exclude_user_id=user_id)
    try:
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(full_name=full_name, email=normalize_handle(email))
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise Conflict("Email is already in use") from e

    user = await get_by_id(db, User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def update_avatar(db: AsyncSession, user_id: int, avatar: UploadedAsset) -> User:
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(avatar_url=avatar.url, avatar_public_id=avatar.public_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    user = await get_by_id(db, User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def update_cover_image(db: AsyncSession, user_id: int, cover: UploadedAsset) -> User:
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(cover_image_url=cover.url, cover_image_public_id=cover.public_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    user = await get_by_id(db, User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def add_to_watch_history(db: AsyncSession, user_id: int, video_id: int) -> None:
    """Append a video to the history unless it is already there."""
    already_watched = exists().where(
        WatchHistoryEntry.user_id == user_id,
        WatchHistoryEntry.video_id == video_id,
    )
    try:
        await db.execute(
            insert(WatchHistoryEntry).from_select(
                ["user_id", "video_id", "watched_at"],
                select(
                    literal(user_id),
                    literal(video_id),
                    literal(utcnow(), DateTime(timezone=True)),
                ).where(~already_watched),
            )
        )
        await db.commit()
    except IntegrityError:
        # Lost a race with an identical insert; the entry exists either way
        await db.rollback()


async def get_watch_history_ids(db: AsyncSession, user_id: int) -> list[int]:
    result = await db.execute(
        select(WatchHistoryEntry.video_id)
        .where(WatchHistoryEntry.user_id == user_id)
        .order_by(WatchHistoryEntry.id)
    )
    return list(result.scalars().all())


async def get_watch_history(db: AsyncSession, user_id: int) -> list[VideoWithOwner]:
    """Watched videos with their owners, in three queries."""
    video_ids = await get_watch_history_ids(db, user_id)
    videos = await get_many_by_ids(db, Video, video_ids)
    owners = await get_many_by_ids(db, User, (v.owner_id for v in videos.values()))
    return build_watch_history(video_ids, videos, list(owners.values()))


async def get_subscriber_ids(db: AsyncSession, channel_id: int) -> list[int]:
    result = await db.execute(
        select(Subscription.subscriber_id)
        .where(Subscription.channel_id == channel_id)
        .order_by(Subscription.id)
    )
    return list(result.scalars().all())


async def get_subscribed_channel_ids(db: AsyncSession, subscriber_id: int) -> list[int]:
    result = await db.execute(
        select(Subscription.channel_id)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(Subscription.id)
    )
    return list(result.scalars().all())


async def get_channel_profile(
    db: AsyncSession, username: str, requester_id: int | None
) -> ChannelProfile:
    """Channel page for ``username`` as seen by ``requester_id``."""
    if not require_text(username):
        raise ValidationError("Username is missing")

    channel = await get_user_by_username(db, username)
    if not channel:
        raise NotFound("Channel does not exist")

    subscriber_ids = await get_subscriber_ids(db, channel.id)
    subscribed_to_ids = await get_subscribed_channel_ids(db, channel.id)
    return build_channel_profile(channel, subscriber_ids, subscribed_to_ids, requester_id)
