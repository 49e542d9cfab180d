"""Session lifecycle: login, logout and refresh-token rotation.

A user holds at most one live refresh token, stored on the user row. Login
and refresh replace it, logout clears it. A refresh request must present
exactly the stored value; anything else (an older token, a token already
rotated away) is rejected.
"""

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth.passwords import PasswordHasher, get_password_hasher
from videotube.auth.tokens import TokenError, TokenSigner, get_token_signer
from videotube.config import Settings, get_settings
from videotube.constants import TOKEN_TYPE_ACCESS, TOKEN_TYPE_REFRESH
from videotube.db.crud.common import require_text
from videotube.db.crud.users import (
    get_user,
    get_user_by_identifier,
    rotate_refresh_token,
    set_refresh_token,
    update_password_hash,
)
from videotube.exceptions import NotFound, Unauthorized, ValidationError
from videotube.models.user import User
from videotube.utils.logging import LogContext, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenPairResult:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


def issue_token_pair(
    user: User,
    signer: TokenSigner | None = None,
    settings: Settings | None = None,
) -> TokenPairResult:
    """Sign a short-lived access token and a long-lived refresh token."""
    signer = signer or get_token_signer()
    settings = settings or get_settings()

    access_token = signer.sign(
        {
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "full_name": user.full_name,
            "type": TOKEN_TYPE_ACCESS,
        },
        settings.access_token_secret,
        timedelta(minutes=settings.access_token_expire_minutes),
    )
    refresh_token = signer.sign(
        {"sub": str(user.id), "type": TOKEN_TYPE_REFRESH},
        settings.refresh_token_secret,
        timedelta(days=settings.refresh_token_expire_days),
    )
    return TokenPairResult(access_token=access_token, refresh_token=refresh_token)


def decode_user_id(claims: dict, expected_type: str) -> int:
    """User id from verified claims, checking the token type."""
    if claims.get("type") != expected_type:
        raise Unauthorized("Invalid token type")
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise Unauthorized("Invalid token subject") from e


async def login(
    db: AsyncSession,
    identifier: str | None,
    password: str | None,
    hasher: PasswordHasher | None = None,
) -> LoginResult:
    """Authenticate by username or email and open a session."""
    hasher = hasher or get_password_hasher()
    identifier = require_text(identifier)
    if not identifier:
        raise ValidationError("username or email is required")
    if not password:
        raise ValidationError("password is required")

    user = await get_user_by_identifier(db, identifier)
    if not user:
        raise NotFound("User does not exist")
    if not await hasher.verify(password, user.password_hash):
        logger.info(f"Rejected login for user {user.id}: bad credentials")
        raise Unauthorized("Invalid user credentials")

    tokens = issue_token_pair(user)
    await set_refresh_token(db, user.id, tokens.refresh_token)
    logger.info(f"User {user.id} logged in")
    return LoginResult(
        user=user,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


async def logout(db: AsyncSession, user: User) -> None:
    """Close the session by clearing the stored refresh token."""
    await set_refresh_token(db, user.id, None)
    logger.info(f"User {user.id} logged out")


async def refresh_session(
    db: AsyncSession,
    incoming_token: str | None,
    signer: TokenSigner | None = None,
) -> TokenPairResult:
    """Exchange the current refresh token for a new pair (rotation)."""
    signer = signer or get_token_signer()
    settings = get_settings()
    if not incoming_token:
        raise Unauthorized("Unauthorized request")

    try:
        claims = signer.verify(incoming_token, settings.refresh_token_secret)
    except TokenError as e:
        raise Unauthorized(str(e)) from e

    user_id = decode_user_id(claims, TOKEN_TYPE_REFRESH)
    log = LogContext(logger, user_id=user_id)
    user = await get_user(db, user_id)
    if not user:
        raise Unauthorized("Invalid refresh token")

    if user.refresh_token is None or incoming_token != user.refresh_token:
        log.warning("Refresh token reuse or stale token rejected")
        raise Unauthorized("Refresh token is expired or used")

    tokens = issue_token_pair(user, signer=signer, settings=settings)
    if not await rotate_refresh_token(db, user.id, incoming_token, tokens.refresh_token):
        log.warning("Refresh token rotated concurrently")
        raise Unauthorized("Refresh token is expired or used")

    log.debug("Refresh token rotated")
    return tokens


async def change_password(
    db: AsyncSession,
    user: User,
    old_password: str | None,
    new_password: str | None,
    hasher: PasswordHasher | None = None,
) -> None:
    hasher = hasher or get_password_hasher()
    if not old_password or not new_password:
        raise ValidationError("Old and new password are required")
    if not await hasher.verify(old_password, user.password_hash):
        raise ValidationError("Invalid old password")

    await update_password_hash(db, user.id, await hasher.hash(new_password))
    logger.info(f"User {user.id} changed password")
