"""Authentication module."""

from videotube.auth.dependencies import get_current_user, get_optional_user
from videotube.auth.permissions import authorize, ensure_owner

__all__ = [
    "authorize",
    "ensure_owner",
    "get_current_user",
    "get_optional_user",
]
