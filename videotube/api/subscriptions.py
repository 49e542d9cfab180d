"""Subscription endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth import get_current_user
from videotube.db import get_db
from videotube.db.crud import (
    list_channel_subscribers,
    list_subscribed_channels,
    toggle_subscription,
)
from videotube.models.schemas import ApiResponse, SubscriptionStatus, UserSummary
from videotube.models.user import User

router = APIRouter()


@router.post("/c/{channel_id}", response_model=ApiResponse[SubscriptionStatus])
async def toggle_subscription_endpoint(
    channel_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    subscribed = await toggle_subscription(db, user.id, channel_id)
    message = "Subscribed successfully" if subscribed else "Unsubscribed successfully"
    return ApiResponse.build(SubscriptionStatus(subscribed=subscribed), message)


@router.get("/c/{channel_id}", response_model=ApiResponse[list[UserSummary]])
async def get_channel_subscribers(
    channel_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """Users subscribed to a channel."""
    subscribers = await list_channel_subscribers(db, channel_id)
    return ApiResponse.build(subscribers, "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}", response_model=ApiResponse[list[UserSummary]])
async def get_subscribed_channels(
    subscriber_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """Channels a user subscribes to."""
    channels = await list_subscribed_channels(db, subscriber_id)
    return ApiResponse.build(channels, "Subscribed channels fetched successfully")
