from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db
from vidtube.core.response import success
from vidtube.services.subscription_service import SubscriptionService
from vidtube.services.views import ChannelViews

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    result = await SubscriptionService.toggle(db, channel_id, user_id)
    return success(data=result.model_dump())


@router.get("/c/{channel_id}")
async def list_subscribers(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    items = await ChannelViews.subscribers(db, channel_id)
    return success(data=jsonable_encoder(items))


@router.get("/u/{subscriber_id}")
async def list_subscribed_channels(
    subscriber_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    items = await ChannelViews.subscribed_channels(db, subscriber_id)
    return success(data=jsonable_encoder(items))
