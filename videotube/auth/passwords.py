"""Password hashing (bcrypt via passlib)."""

import asyncio
from functools import lru_cache

from passlib.context import CryptContext

from videotube.config import get_settings


class PasswordHasher:
    """Hash and verify user passwords in a worker thread, off the event loop."""

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self._context.hash, plaintext)

    async def verify(self, plaintext: str, hashed: str) -> bool:
        """Check ``plaintext`` against ``hashed``; a malformed hash never matches."""
        try:
            return await asyncio.to_thread(self._context.verify, plaintext, hashed)
        except ValueError:
            return False


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get the application password hasher."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)
