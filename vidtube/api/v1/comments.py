from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db
from vidtube.core.pagination import PageQuery
from vidtube.core.response import success
from vidtube.schemas.comment import CommentListItem, CommentRequest
from vidtube.schemas.common import PageResponse
from vidtube.services.comment_service import CommentService
from vidtube.services.views import CommentViews

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{video_id}")
async def list_comments(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
) -> JSONResponse:
    page_query = PageQuery.parse(page, limit)
    items, total = await CommentViews.for_video(db, video_id, page_query)
    response = PageResponse[CommentListItem](
        items=items,
        total=total,
        page=page_query.page,
        page_size=page_query.limit,
    )
    return success(data=jsonable_encoder(response))


@router.post("/{video_id}")
async def add_comment(
    video_id: str,
    data: CommentRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    comment = await CommentService.add(db, video_id, user_id, data.content)
    return success(data=jsonable_encoder(comment), status_code=201)


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: str,
    data: CommentRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    comment = await CommentService.update(db, comment_id, user_id, data.content)
    return success(data=jsonable_encoder(comment))


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    await CommentService.delete(db, comment_id, user_id)
    return success()
