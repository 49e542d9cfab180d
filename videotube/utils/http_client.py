"""Process-wide httpx client for content-store calls.

Created lazily on first upload and closed by the application lifespan.
"""

import httpx

from videotube.constants import UPLOAD_TIMEOUT

_POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30,
)

_storage_client: httpx.AsyncClient | None = None


def get_storage_client() -> httpx.AsyncClient:
    global _storage_client
    if _storage_client is None:
        _storage_client = httpx.AsyncClient(
            timeout=UPLOAD_TIMEOUT,
            limits=_POOL_LIMITS,
            http2=False,
        )
    return _storage_client


async def close_all_clients() -> None:
    global _storage_client
    if _storage_client is not None:
        await _storage_client.aclose()
        _storage_client = None
