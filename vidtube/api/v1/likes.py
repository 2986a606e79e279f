from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db
from vidtube.core.response import success
from vidtube.services.like_service import LikeService
from vidtube.services.views import VideoViews

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    result = await LikeService.toggle_video_like(db, video_id, user_id)
    return success(data=result.model_dump())


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    result = await LikeService.toggle_comment_like(db, comment_id, user_id)
    return success(data=result.model_dump())


@router.post("/toggle/t/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    result = await LikeService.toggle_tweet_like(db, tweet_id, user_id)
    return success(data=result.model_dump())


@router.get("/videos")
async def liked_videos(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    items = await VideoViews.liked_videos(db, user_id)
    return success(data=jsonable_encoder(items))
