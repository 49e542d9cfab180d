"""Database module."""

from videotube.db.database import (
    async_session_maker,
    dispose_engine,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "async_session_maker",
    "dispose_engine",
    "engine",
    "get_db",
    "init_db",
]
