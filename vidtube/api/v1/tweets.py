from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db
from vidtube.core.pagination import PageQuery
from vidtube.core.response import success
from vidtube.schemas.common import PageResponse
from vidtube.schemas.tweet import TweetListItem, TweetRequest
from vidtube.services.tweet_service import TweetService
from vidtube.services.views import ChannelViews

router = APIRouter(prefix="/tweets", tags=["tweets"])


@router.post("")
async def create_tweet(
    data: TweetRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    tweet = await TweetService.create(db, user_id, data.content)
    return success(data=jsonable_encoder(tweet), status_code=201)


@router.get("/user/{user_id}")
async def list_user_tweets(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
) -> JSONResponse:
    page_query = PageQuery.parse(page, limit)
    items, total = await ChannelViews.tweets(db, user_id, page_query)
    response = PageResponse[TweetListItem](
        items=items,
        total=total,
        page=page_query.page,
        page_size=page_query.limit,
    )
    return success(data=jsonable_encoder(response))


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: str,
    data: TweetRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    tweet = await TweetService.update(db, tweet_id, user_id, data.content)
    return success(data=jsonable_encoder(tweet))


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    await TweetService.delete(db, tweet_id, user_id)
    return success()
