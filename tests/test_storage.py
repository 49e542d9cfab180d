"""Tests for the Cloudinary content-store client."""

import hashlib
import json

import httpx
import pytest

from videotube.services.storage import CloudinaryStore

SECRET = "cloud-secret"


def make_store(handler) -> CloudinaryStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CloudinaryStore("demo", "key-123", SECRET, client=client)


class TestSignature:
    def test_sign_sorts_params_and_appends_secret(self):
        store = CloudinaryStore("demo", "key-123", SECRET)

        expected = hashlib.sha1(f"public_id=abc&timestamp=100{SECRET}".encode()).hexdigest()

        assert store.sign({"timestamp": 100, "public_id": "abc"}) == expected


class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_returns_asset_and_removes_file(self, tmp_path):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            return httpx.Response(
                200,
                json={
                    "secure_url": "https://res.cloudinary.com/demo/video/upload/clip.mp4",
                    "public_id": "clip",
                    "resource_type": "video",
                    "duration": 3.5,
                },
            )

        staged = tmp_path / "clip.mp4"
        staged.write_bytes(b"video")

        asset = await make_store(handler).upload(staged)

        assert seen["path"] == "/v1_1/demo/auto/upload"
        assert asset.public_id == "clip"
        assert asset.resource_type == "video"
        assert asset.duration == 3.5
        assert asset.url.startswith("https://")
        assert not staged.exists()

    @pytest.mark.asyncio
    async def test_failed_upload_returns_none_and_removes_file(self, tmp_path):
        staged = tmp_path / "clip.mp4"
        staged.write_bytes(b"video")

        asset = await make_store(lambda request: httpx.Response(500)).upload(staged)

        assert asset is None
        assert not staged.exists()

    @pytest.mark.asyncio
    async def test_missing_path(self):
        store = make_store(lambda request: httpx.Response(200, json={}))

        assert await store.upload(None) is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_ok(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.content.decode()
            return httpx.Response(200, content=json.dumps({"result": "ok"}))

        assert await make_store(handler).delete("clip", resource_type="video") is True
        assert seen["path"] == "/v1_1/demo/video/destroy"
        assert "public_id=clip" in seen["body"]

    @pytest.mark.asyncio
    async def test_delete_not_found(self):
        store = make_store(lambda request: httpx.Response(200, json={"result": "not found"}))

        assert await store.delete("clip") is False
