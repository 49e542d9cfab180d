"""Playlist endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth import get_current_user
from videotube.db import get_db
from videotube.db.crud import (
    add_video_to_playlist,
    create_playlist,
    delete_playlist,
    get_playlist_detail,
    get_user_playlists,
    read_playlist,
    remove_video_from_playlist,
    update_playlist,
)
from videotube.db.crud.users import get_user
from videotube.exceptions import NotFound
from videotube.models.schemas import (
    ApiResponse,
    PlaylistCreate,
    PlaylistDetail,
    PlaylistRead,
    PlaylistSummary,
    PlaylistUpdate,
)
from videotube.models.user import User

router = APIRouter()


@router.post("", response_model=ApiResponse[PlaylistRead])
async def create_playlist_endpoint(
    data: PlaylistCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    playlist = await create_playlist(db, user.id, data.name, data.description)
    return ApiResponse.build(await read_playlist(db, playlist), "Playlist created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse[list[PlaylistSummary]])
async def get_user_playlists_endpoint(
    user_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """A user's playlists with video counts and total views."""
    if not await get_user(db, user_id):
        raise NotFound("User not found")
    playlists = await get_user_playlists(db, user_id)
    return ApiResponse.build(playlists, "User playlists fetched successfully")


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetail | None])
async def get_playlist_by_id(
    playlist_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    """Public playlist detail; ``data`` is null when it has no published videos."""
    detail = await get_playlist_detail(db, playlist_id)
    return ApiResponse.build(detail, "Playlist fetched successfully")


@router.patch("/add/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistRead])
async def add_video(
    video_id: int,
    playlist_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    playlist = await add_video_to_playlist(db, playlist_id, video_id, user.id)
    return ApiResponse.build(playlist, "Added video to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistRead])
async def remove_video(
    video_id: int,
    playlist_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    playlist = await remove_video_from_playlist(db, playlist_id, video_id, user.id)
    return ApiResponse.build(playlist, "Removed video from playlist successfully")


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistRead])
async def update_playlist_endpoint(
    playlist_id: int,
    data: PlaylistUpdate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    playlist = await update_playlist(db, playlist_id, data.name, data.description, user.id)
    return ApiResponse.build(playlist, "Playlist updated successfully")


@router.delete("/{playlist_id}", response_model=ApiResponse[dict])
async def delete_playlist_endpoint(
    playlist_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    await delete_playlist(db, playlist_id, user.id)
    return ApiResponse.build({}, "Playlist deleted successfully")
