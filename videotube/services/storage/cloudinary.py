"""Cloudinary content store over its HTTP upload API.

The store is constructed explicitly with its credentials; nothing is read
from the environment inside the client. ``get_content_store`` builds the
application-wide instance from settings and is the FastAPI dependency that
tests override.
"""

import hashlib
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

import httpx

from videotube.config import get_settings
from videotube.constants import CLOUDINARY_API_BASE_URL
from videotube.utils.http_client import get_storage_client
from videotube.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadedAsset:
    """A stored media file: public URL plus the id needed to delete it."""

    url: str
    public_id: str
    resource_type: str = "image"
    duration: float | None = None  # seconds, video/audio only


class ContentStore(Protocol):
    async def upload(self, local_path: str | Path | None) -> UploadedAsset | None: ...

    async def delete(self, public_id: str, resource_type: str = "image") -> bool: ...


class CloudinaryStore:
    """Upload and delete media through Cloudinary's REST API."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        client: httpx.AsyncClient | None = None,
        base_url: str = CLOUDINARY_API_BASE_URL,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self._api_secret = api_secret
        self._client = client
        self._base_url = f"{base_url}/{cloud_name}"

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_storage_client()

    def sign(self, params: dict[str, Any]) -> str:
        """Cloudinary request signature: SHA-1 of the sorted params + secret."""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self._api_secret}".encode()).hexdigest()

    def _signed_form(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        return {**params, "api_key": self.api_key, "signature": self.sign(params)}

    async def upload(self, local_path: str | Path | None) -> UploadedAsset | None:
        """Upload a staged local file and remove it afterwards.

        Returns None on any failure; the local file is removed either way.
        """
        if not local_path:
            return None

        path = Path(local_path)
        try:
            with path.open("rb") as fh:
                response = await self.client.post(
                    f"{self._base_url}/auto/upload",
                    data=self._signed_form({}),
                    files={"file": (path.name, fh)},
                )
            response.raise_for_status()
            payload = response.json()
            asset = UploadedAsset(
                url=payload.get("secure_url") or payload["url"],
                public_id=payload["public_id"],
                resource_type=payload.get("resource_type", "image"),
                duration=payload.get("duration"),
            )
            logger.info(f"Uploaded {path.name} to content store: {asset.url}")
            return asset
        except (httpx.HTTPError, OSError, KeyError, ValueError) as e:
            logger.error(f"Content store upload failed for {path.name}: {e}")
            return None
        finally:
            path.unlink(missing_ok=True)

    async def delete(self, public_id: str, resource_type: str = "image") -> bool:
        """Delete an asset by public id. Returns True if the store removed it."""
        try:
            response = await self.client.post(
                f"{self._base_url}/{resource_type}/destroy",
                data=self._signed_form({"public_id": public_id}),
            )
            response.raise_for_status()
            deleted = response.json().get("result") == "ok"
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Content store delete failed for {public_id}: {e}")
            return False

        if not deleted:
            logger.warning(f"Content store did not delete {public_id}")
        return deleted


@lru_cache
def get_content_store() -> CloudinaryStore:
    """Get the application content store configured from settings."""
    settings = get_settings()
    return CloudinaryStore(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
    )
