"""Ownership gate used by every mutating operation."""

from videotube.exceptions import Unauthorized


def _normalize(identity: int | str | None) -> str | None:
    return None if identity is None else str(identity).strip()


def authorize(acting_id: int | str | None, owner_id: int | str | None) -> bool:
    """True iff the acting identity is the resource owner."""
    acting, owner = _normalize(acting_id), _normalize(owner_id)
    return acting is not None and owner is not None and acting == owner


def ensure_owner(
    acting_id: int | str | None,
    owner_id: int | str | None,
    message: str = "Only the owner can modify this resource",
) -> None:
    """Raise Unauthorized unless the acting identity owns the resource.

    Call after the resource is known to exist, before mutating it.
    """
    if not authorize(acting_id, owner_id):
        raise Unauthorized(message)
