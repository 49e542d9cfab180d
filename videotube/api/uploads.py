"""Staging of multipart uploads for the content store."""

import asyncio
import shutil
import uuid
from pathlib import Path

from fastapi import UploadFile

from videotube.config import get_settings
from videotube.constants import UPLOAD_CHUNK_SIZE
from videotube.exceptions import InternalFailure
from videotube.services.storage import ContentStore, UploadedAsset
from videotube.utils.logging import get_logger

logger = get_logger(__name__)


async def stage_upload(upload: UploadFile) -> Path:
    """Stream an uploaded file to the temp dir under a collision-free name."""
    temp_dir = Path(get_settings().upload_temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)

    suffix = Path(upload.filename or "").suffix
    path = temp_dir / f"{uuid.uuid4().hex}{suffix}"
    await upload.seek(0)

    def copy() -> None:
        with path.open("wb") as fh:
            shutil.copyfileobj(upload.file, fh, UPLOAD_CHUNK_SIZE)

    await asyncio.to_thread(copy)
    return path


async def store_upload(
    store: ContentStore, upload: UploadFile, what: str
) -> UploadedAsset:
    """Stage ``upload`` and hand it to the content store.

    The store removes the staged file. A failed upload is an InternalFailure.
    """
    path = await stage_upload(upload)
    asset = await store.upload(path)
    if asset is None:
        raise InternalFailure(f"Error while uploading {what}")
    return asset


async def discard_asset(
    store: ContentStore, public_id: str | None, resource_type: str = "image"
) -> None:
    """Best-effort removal of a replaced or orphaned asset."""
    if not public_id:
        return
    if not await store.delete(public_id, resource_type=resource_type):
        logger.warning(f"Asset {public_id} was left in the content store")


class UploadBatch:
    """Assets uploaded for one request, discarded again if the request fails.

    Usage::

        async with UploadBatch(store) as batch:
            avatar = await batch.upload(file, "avatar")
            await create_user(...)
    """

    def __init__(self, store: ContentStore) -> None:
        self.store = store
        self.assets: list[UploadedAsset] = []

    async def upload(self, upload: UploadFile, what: str) -> UploadedAsset:
        asset = await store_upload(self.store, upload, what)
        self.assets.append(asset)
        return asset

    async def __aenter__(self) -> "UploadBatch":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            for asset in self.assets:
                await discard_asset(self.store, asset.public_id, asset.resource_type)
        return False
