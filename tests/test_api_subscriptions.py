"""Tests for /api/v1/subscriptions endpoints."""

import pytest
from httpx import AsyncClient

from videotube.models.user import User


class TestSubscriptions:
    @pytest.mark.asyncio
    async def test_toggle_subscribe_and_unsubscribe(
        self, authenticated_client: AsyncClient, other_user: User
    ):
        first = await authenticated_client.post(f"/api/v1/subscriptions/c/{other_user.id}")
        second = await authenticated_client.post(f"/api/v1/subscriptions/c/{other_user.id}")

        assert first.json()["data"] == {"subscribed": True}
        assert second.json()["data"] == {"subscribed": False}

    @pytest.mark.asyncio
    async def test_cannot_subscribe_to_self(
        self, authenticated_client: AsyncClient, test_user: User
    ):
        response = await authenticated_client.post(f"/api/v1/subscriptions/c/{test_user.id}")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_channel(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post("/api/v1/subscriptions/c/999")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_subscriber_and_subscription_lists(
        self, authenticated_client: AsyncClient, test_user: User, other_user: User
    ):
        await authenticated_client.post(f"/api/v1/subscriptions/c/{other_user.id}")

        subscribers = await authenticated_client.get(f"/api/v1/subscriptions/c/{other_user.id}")
        channels = await authenticated_client.get(f"/api/v1/subscriptions/u/{test_user.id}")

        assert [u["username"] for u in subscribers.json()["data"]] == ["alice"]
        assert [u["id"] for u in channels.json()["data"]] == [other_user.id]
