"""Video endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.api.uploads import UploadBatch, discard_asset
from videotube.auth import get_current_user, get_optional_user
from videotube.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    MAX_PAGE_SIZE,
    VALID_SORT_ORDERS,
    VALID_VIDEO_SORT_FIELDS,
)
from videotube.db import get_db
from videotube.db.crud import (
    create_video,
    delete_video,
    get_owned_video,
    get_video_detail,
    list_videos,
    toggle_publish_status,
    update_video,
)
from videotube.db.crud.common import require_text
from videotube.exceptions import ValidationError
from videotube.models.schemas import ApiResponse, VideoDetail, VideoPage, VideoRead
from videotube.models.user import User
from videotube.services.storage import ContentStore, get_content_store
from videotube.utils.pagination import total_pages

router = APIRouter()


def _require_title_and_description(title: str | None, description: str | None) -> None:
    if not require_text(title) or not require_text(description):
        raise ValidationError("Title and description are required")


@router.get("", response_model=ApiResponse[VideoPage])
async def get_all_videos(
    db: Annotated[AsyncSession, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
    query: Annotated[str | None, Query()] = None,
    sort_by: Annotated[str, Query(alias="sortBy")] = DEFAULT_SORT_FIELD,
    sort_type: Annotated[str, Query(alias="sortType")] = DEFAULT_SORT_ORDER,
    user_id: Annotated[int | None, Query(alias="userId")] = None,
) -> ApiResponse:
    """List published videos with search, sorting and pagination."""
    if sort_by not in VALID_VIDEO_SORT_FIELDS:
        raise ValidationError(f"sortBy must be one of {', '.join(VALID_VIDEO_SORT_FIELDS)}")
    if sort_type not in VALID_SORT_ORDERS:
        raise ValidationError("sortType must be asc or desc")

    items, total = await list_videos(
        db,
        page=page,
        limit=limit,
        query=require_text(query),
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
    )
    return ApiResponse.build(
        VideoPage(
            items=items, total=total, page=page, limit=limit, pages=total_pages(total, limit)
        ),
        "Videos fetched successfully",
    )


@router.post("", response_model=ApiResponse[VideoRead], status_code=201)
async def publish_video(
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[ContentStore, Depends(get_content_store)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    video_file: Annotated[UploadFile | None, File(alias="videoFile")] = None,
    thumbnail: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse:
    """Upload a video and its thumbnail and publish it."""
    _require_title_and_description(title, description)
    if video_file is None or thumbnail is None:
        raise ValidationError("Video file and thumbnail are required")

    async with UploadBatch(store) as batch:
        video_asset = await batch.upload(video_file, "video")
        thumbnail_asset = await batch.upload(thumbnail, "thumbnail")

        video = await create_video(
            db,
            owner_id=user.id,
            title=title,
            description=description,
            video_file=video_asset,
            thumbnail=thumbnail_asset,
        )
    return ApiResponse.build(
        VideoRead.model_validate(video), "Video uploaded successfully", status_code=201
    )


@router.get("/{video_id}", response_model=ApiResponse[VideoDetail])
async def get_video_by_id(
    video_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> ApiResponse:
    """Watch page: counts a view and records the viewer's history."""
    detail = await get_video_detail(db, video_id, user.id if user else None)
    return ApiResponse.build(detail, "Video fetched successfully")


@router.patch("/{video_id}", response_model=ApiResponse[VideoRead])
async def update_video_details(
    video_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[ContentStore, Depends(get_content_store)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    thumbnail: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse:
    _require_title_and_description(title, description)
    video = await get_owned_video(db, video_id, user.id)

    previous_thumbnail = video.thumbnail_public_id
    async with UploadBatch(store) as batch:
        new_thumbnail = await batch.upload(thumbnail, "thumbnail") if thumbnail else None
        updated = await update_video(db, video, title, description, thumbnail=new_thumbnail)
    if new_thumbnail is not None:
        await discard_asset(store, previous_thumbnail)
    return ApiResponse.build(VideoRead.model_validate(updated), "Video updated successfully")


@router.delete("/{video_id}", response_model=ApiResponse[dict])
async def delete_video_endpoint(
    video_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> ApiResponse:
    """Delete a video, everything referencing it, then its stored assets."""
    video = await get_owned_video(db, video_id, user.id)
    video_public_id, thumbnail_public_id = video.video_file_public_id, video.thumbnail_public_id

    await delete_video(db, video)
    await discard_asset(store, video_public_id, resource_type="video")
    await discard_asset(store, thumbnail_public_id)
    return ApiResponse.build({}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[VideoRead])
async def toggle_publish(
    video_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    video = await get_owned_video(db, video_id, user.id)
    updated = await toggle_publish_status(db, video)
    return ApiResponse.build(
        VideoRead.model_validate(updated), "Video publish status toggled successfully"
    )
