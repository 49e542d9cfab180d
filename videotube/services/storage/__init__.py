"""Content store (object storage + CDN) client."""

from videotube.services.storage.cloudinary import (
    CloudinaryStore,
    ContentStore,
    UploadedAsset,
    get_content_store,
)

__all__ = [
    "CloudinaryStore",
    "ContentStore",
    "UploadedAsset",
    "get_content_store",
]
