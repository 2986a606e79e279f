from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_db, get_optional_user_id
from vidtube.core.response import success
from vidtube.services.views import ChannelViews

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get("/{username}")
async def get_channel_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
    caller_id: Optional[str] = Depends(get_optional_user_id),
) -> JSONResponse:
    profile = await ChannelViews.profile(db, username, caller_id)
    return success(data=jsonable_encoder(profile))
