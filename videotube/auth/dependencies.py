"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth.session import decode_user_id
from videotube.auth.tokens import TokenError, get_token_signer
from videotube.config import get_settings
from videotube.constants import ACCESS_TOKEN_COOKIE, TOKEN_TYPE_ACCESS
from videotube.db import get_db
from videotube.db.crud.common import get_by_id
from videotube.exceptions import Unauthorized
from videotube.models.user import User


def extract_access_token(request: Request) -> str | None:
    """Access token from the cookie, else from an ``Authorization: Bearer`` header."""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token

    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def _resolve_user(token: str, db: AsyncSession) -> User:
    try:
        claims = get_token_signer().verify(token, get_settings().access_token_secret)
    except TokenError as e:
        raise Unauthorized(str(e)) from e

    user = await get_by_id(db, User, decode_user_id(claims, TOKEN_TYPE_ACCESS))
    if not user:
        raise Unauthorized("Invalid access token")
    return user


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current user, raising 401 if not authenticated."""
    token = extract_access_token(request)
    if not token:
        raise Unauthorized("Unauthorized request")
    return await _resolve_user(token, db)


async def get_optional_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Get current user if a valid token is present, else None."""
    token = extract_access_token(request)
    if not token:
        return None
    try:
        return await _resolve_user(token, db)
    except Unauthorized:
        return None
