from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db, get_media_service, get_optional_user_id
from vidtube.api.uploads import stage_upload
from vidtube.core.pagination import PageQuery, SortQuery
from vidtube.core.response import success
from vidtube.schemas.common import PageResponse
from vidtube.schemas.video import VideoCard
from vidtube.services.media_service import MediaService
from vidtube.services.video_service import VideoService
from vidtube.services.views import VideoViews

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("")
async def list_videos(
    db: AsyncSession = Depends(get_db),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    query: Optional[str] = Query(default=None),
    sort_by: Optional[str] = Query(default=None),
    sort_type: Optional[str] = Query(default=None),
    creator: Optional[str] = Query(default=None),
    user_id: Optional[str] = Query(default=None),
) -> JSONResponse:
    """List published videos with search, creator filter, sorting and pagination."""
    page_query = PageQuery.parse(page, limit)
    items, total = await VideoViews.feed(
        db,
        page_query,
        SortQuery.parse(sort_by, sort_type),
        query=query,
        creator=creator,
        owner_id=user_id,
    )
    response = PageResponse[VideoCard](
        items=items,
        total=total,
        page=page_query.page,
        page_size=page_query.limit,
    )
    return success(data=jsonable_encoder(response))


@router.post("")
async def publish_video(
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    video_file: Optional[UploadFile] = File(default=None),
    thumbnail: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    video = await VideoService.publish(
        db,
        media,
        user_id,
        title=title,
        description=description,
        video_path=await stage_upload(video_file),
        thumbnail_path=await stage_upload(thumbnail),
    )
    return success(data=jsonable_encoder(video), status_code=201)


@router.get("/{video_id}")
async def get_video(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: Optional[str] = Depends(get_optional_user_id),
) -> JSONResponse:
    video = await VideoViews.detail(db, video_id, caller_id)
    return success(data=jsonable_encoder(video))


@router.patch("/{video_id}")
async def update_video(
    video_id: str,
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    thumbnail: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    video = await VideoService.update(
        db,
        media,
        video_id,
        user_id,
        title=title,
        description=description,
        thumbnail_path=await stage_upload(thumbnail),
    )
    return success(data=jsonable_encoder(video))


@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    await VideoService.delete(db, media, video_id, user_id)
    return success()


@router.patch("/{video_id}/toggle-publish")
async def toggle_publish_status(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    video = await VideoService.toggle_publish_status(db, video_id, user_id)
    return success(data=jsonable_encoder(video))
