"""Tweet endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth import get_current_user
from videotube.db import get_db
from videotube.db.crud import create_tweet, delete_tweet, list_user_tweets, update_tweet
from videotube.models.schemas import ApiResponse, TweetCreate, TweetRead
from videotube.models.user import User

router = APIRouter()


@router.post("", response_model=ApiResponse[TweetRead], status_code=201)
async def create_tweet_endpoint(
    data: TweetCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    tweet = await create_tweet(db, user, data.content)
    return ApiResponse.build(tweet, "Tweet created successfully", status_code=201)


@router.get("/user/{user_id}", response_model=ApiResponse[list[TweetRead]])
async def get_user_tweets(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    tweets = await list_user_tweets(db, user_id)
    return ApiResponse.build(tweets, "Tweets fetched successfully")


@router.patch("/{tweet_id}", response_model=ApiResponse[TweetRead])
async def update_tweet_endpoint(
    tweet_id: int,
    data: TweetCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    tweet = await update_tweet(db, tweet_id, user, data.content)
    return ApiResponse.build(tweet, "Tweet updated successfully")


@router.delete("/{tweet_id}", response_model=ApiResponse[dict])
async def delete_tweet_endpoint(
    tweet_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    await delete_tweet(db, tweet_id, user.id)
    return ApiResponse.build({}, "Tweet deleted successfully")
