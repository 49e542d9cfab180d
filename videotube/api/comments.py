"""Comment endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.auth import get_current_user
from videotube.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from videotube.db import get_db
from videotube.db.crud import add_comment, delete_comment, list_video_comments, update_comment
from videotube.models.schemas import ApiResponse, CommentCreate, CommentPage, CommentRead
from videotube.models.user import User
from videotube.utils.pagination import total_pages

router = APIRouter()


@router.get("/{video_id}", response_model=ApiResponse[CommentPage])
async def get_video_comments(
    video_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE,
) -> ApiResponse:
    items, total = await list_video_comments(db, video_id, page=page, limit=limit)
    return ApiResponse.build(
        CommentPage(
            items=items, total=total, page=page, limit=limit, pages=total_pages(total, limit)
        ),
        "Comments fetched successfully",
    )


@router.post("/{video_id}", response_model=ApiResponse[CommentRead], status_code=201)
async def add_video_comment(
    video_id: int,
    data: CommentCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    comment = await add_comment(db, video_id, user.id, data.content)
    return ApiResponse.build(comment, "Comment added successfully", status_code=201)


@router.patch("/c/{comment_id}", response_model=ApiResponse[CommentRead])
async def update_video_comment(
    comment_id: int,
    data: CommentCreate,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    comment = await update_comment(db, comment_id, user.id, data.content)
    return ApiResponse.build(comment, "Comment updated successfully")


@router.delete("/c/{comment_id}", response_model=ApiResponse[dict])
async def delete_video_comment(
    comment_id: int,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApiResponse:
    await delete_comment(db, comment_id, user.id)
    return ApiResponse.build({}, "Comment deleted successfully")
