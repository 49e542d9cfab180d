"""User account, session and channel endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.api.uploads import UploadBatch, discard_asset
from videotube.auth import get_current_user, get_optional_user
from videotube.auth.passwords import get_password_hasher
from videotube.auth.session import change_password, login, logout, refresh_session
from videotube.config import get_settings
from videotube.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from videotube.db import get_db
from videotube.db.crud import (
    create_user,
    ensure_available,
    get_channel_profile,
    get_watch_history,
    update_account,
    update_avatar,
    update_cover_image,
)
from videotube.db.crud.common import require_text
from videotube.exceptions import ValidationError
from videotube.models.schemas import (
    AccountUpdate,
    ApiResponse,
    ChangePasswordRequest,
    ChannelProfile,
    LoginData,
    LoginRequest,
    RefreshRequest,
    TokenPair,
    UserRead,
    VideoWithOwner,
)
from videotube.models.user import User
from videotube.services.storage import ContentStore, get_content_store

router = APIRouter()


def _set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    secure = get_settings().cookie_secure
    response.set_cookie(ACCESS_TOKEN_COOKIE, access_token, httponly=True, secure=secure)
    response.set_cookie(REFRESH_TOKEN_COOKIE, refresh_token, httponly=True, secure=secure)


def _clear_session_cookies(response: Response) -> None:
    secure = get_settings().cookie_secure
    response.delete_cookie(ACCESS_TOKEN_COOKIE, httponly=True, secure=secure)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, httponly=True, secure=secure)


@router.post("/register", response_model=ApiResponse[UserRead], status_code=201)
async def register(
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[ContentStore, Depends(get_content_store)],
    full_name: Annotated[str | None, Form(alias="fullName")] = None,
    email: Annotated[str | None, Form()] = None,
    username: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    avatar: Annotated[UploadFile | None, File()] = None,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
) -> ApiResponse:
    """Register a new user with an avatar and optional cover image."""
    full_name = require_text(full_name)
    email, username = require_text(email), require_text(username)
    if not all([full_name, email, username, password and password.strip()]):
        raise ValidationError("All fields are required")
    if avatar is None:
        raise ValidationError("Avatar file is required")

    await ensure_available(db, username=username, email=email)

    async with UploadBatch(store) as batch:
        avatar_asset = await batch.upload(avatar, "avatar")
        cover_asset = await batch.upload(cover_image, "cover image") if cover_image else None

        user = await create_user(
            db,
            username=username,
            email=email,
            full_name=full_name,
            password_hash=await get_password_hasher().hash(password),
            avatar=avatar_asset,
            cover_image=cover_asset,
        )
    return ApiResponse.build(
        UserRead.model_validate(user), "User registered successfully", status_code=201
    )


@router.post("/login", response_model=ApiResponse[LoginData])
async def login_user(
    data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """Log in with username or email and set session cookies."""
    result = await login(db, data.username or data.email, data.password)
    _set_session_cookies(response, result.access_token, result.refresh_token)
    return ApiResponse.build(
        LoginData(
            user=UserRead.model_validate(result.user),
            access_token=result.access_token,
            refresh_token=result.refresh_token,
        ),
        "User logged in successfully",
    )


@router.post("/logout", response_model=ApiResponse[dict])
async def logout_user(
    response: Response,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    await logout(db, user)
    _clear_session_cookies(response)
    return ApiResponse.build({}, "User logged out")


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
async def refresh_access_token(
    request: Request,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RefreshRequest | None = None,
) -> ApiResponse:
    """Rotate the refresh token (from cookie or body) and issue a new pair."""
    incoming = request.cookies.get(REFRESH_TOKEN_COOKIE) or (data.refresh_token if data else None)
    tokens = await refresh_session(db, incoming)
    _set_session_cookies(response, tokens.access_token, tokens.refresh_token)
    return ApiResponse.build(
        TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token),
        "Access token refreshed",
    )


@router.post("/change-password", response_model=ApiResponse[dict])
async def change_current_password(
    data: ChangePasswordRequest,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    await change_password(db, user, data.old_password, data.new_password)
    return ApiResponse.build({}, "Password changed successfully")


@router.get("/current-user", response_model=ApiResponse[UserRead])
async def get_current_user_endpoint(
    user: Annotated[User, Depends(get_current_user)],
) -> ApiResponse:
    return ApiResponse.build(UserRead.model_validate(user), "User fetched successfully")


@router.patch("/update-account", response_model=ApiResponse[UserRead])
async def update_account_details(
    data: AccountUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    updated = await update_account(db, user.id, data.full_name, data.email)
    return ApiResponse.build(
        UserRead.model_validate(updated), "Account details updated successfully"
    )


@router.patch("/avatar", response_model=ApiResponse[UserRead])
async def update_user_avatar(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[ContentStore, Depends(get_content_store)],
    avatar: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse:
    """Replace the avatar; the previous asset is removed afterwards."""
    if avatar is None:
        raise ValidationError("Avatar file is missing")

    previous = user.avatar_public_id
    async with UploadBatch(store) as batch:
        asset = await batch.upload(avatar, "avatar")
        updated = await update_avatar(db, user.id, asset)
    await discard_asset(store, previous)
    return ApiResponse.build(UserRead.model_validate(updated), "Avatar updated successfully")


@router.patch("/cover-image", response_model=ApiResponse[UserRead])
async def update_user_cover_image(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[ContentStore, Depends(get_content_store)],
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
) -> ApiResponse:
    if cover_image is None:
        raise ValidationError("Cover image file is missing")

    previous = user.cover_image_public_id
    async with UploadBatch(store) as batch:
        asset = await batch.upload(cover_image, "cover image")
        updated = await update_cover_image(db, user.id, asset)
    await discard_asset(store, previous)
    return ApiResponse.build(
        UserRead.model_validate(updated), "Cover image updated successfully"
    )


@router.get("/c/{username}", response_model=ApiResponse[ChannelProfile])
async def get_user_channel_profile(
    username: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> ApiResponse:
    """Channel page with subscriber counts as seen by the requester."""
    profile = await get_channel_profile(db, username, user.id if user else None)
    return ApiResponse.build(profile, "User channel fetched successfully")


@router.get("/history", response_model=ApiResponse[list[VideoWithOwner]])
async def get_user_watch_history(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    history = await get_watch_history(db, user.id)
    return ApiResponse.build(history, "Watch history fetched successfully")
