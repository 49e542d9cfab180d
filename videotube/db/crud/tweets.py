"""CRUD operations for tweets."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth.permissions import ensure_owner
from videotube.db.crud.common import fresh, get_by_id, require_content
from videotube.db.crud.likes import count_likes
from videotube.exceptions import NotFound
from videotube.models.like import Like
from videotube.models.schemas import TweetRead
from videotube.models.tweet import Tweet
from videotube.models.user import User
from videotube.services.aggregation import owner_summary


def _read(tweet: Tweet, owner: User | None, likes_count: int) -> TweetRead:
    return TweetRead(
        id=tweet.id,
        content=tweet.content,
        owner_id=tweet.owner_id,
        owner=owner_summary(owner),
        likes_count=likes_count,
        created_at=tweet.created_at,
        updated_at=tweet.updated_at,
    )

async def create_tweet(db: AsyncSession, owner: User, content: str | None) -> TweetRead:
    tweet = Tweet(content=require_content(content), owner_id=owner.id)
    db.add(tweet)
    await db.commit()
    await db.refresh(tweet)
    return _read(tweet, owner, 0)

async def list_user_tweets(db: AsyncSession, user_id: int) -> list[TweetRead]:
    """A user's tweets, newest first, with like counts."""
    owner = await get_by_id(db, User, user_id)
    if not owner:
        raise NotFound("User not found")

    result = await db.execute(
        fresh(
            select(Tweet)
            .where(Tweet.owner_id == user_id)
            .order_by(Tweet.created_at.desc(), Tweet.id.desc())
        )
    )
    tweets = result.scalars().all()
    likes = await count_likes(db, Like.tweet_id, [t.id for t in tweets])
    return [_read(tweet, owner, likes.get(tweet.id, 0)) for tweet in tweets]

async def get_owned_tweet(db: AsyncSession, tweet_id: int, acting_id: int) -> Tweet:
    tweet = await get_by_id(db, Tweet, tweet_id)
    if not tweet:
        raise NotFound("Tweet not found")
    ensure_owner(acting_id, tweet.owner_id, "Only the owner can modify this tweet")
    return tweet

async def update_tweet(
    db: AsyncSession, tweet_id: int, acting: User, content: str | None
) -> TweetRead:
    content = require_content(content)
    await get_owned_tweet(db, tweet_id, acting.id)

    await db.execute(
        update(Tweet)
        .where(Tweet.id == tweet_id)
        .values(content=content)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    tweet = await get_by_id(db, Tweet, tweet_id)
    likes = await count_likes(db, Like.tweet_id, [tweet_id])
    return _read(tweet, acting, likes.get(tweet_id, 0))

async def delete_tweet(db: AsyncSession, tweet_id: int, acting_id: int) -> None:
    await get_owned_tweet(db, tweet_id, acting_id)
    await db.execute(delete(Like).where(Like.tweet_id == tweet_id))
    await db.execute(delete(Tweet).where(Tweet.id == tweet_id))
    await db.commit()
