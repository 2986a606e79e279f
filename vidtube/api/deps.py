from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.security import resolve_caller, resolve_optional_caller
from vidtube.db import Database
from vidtube.services.media_service import MediaService
from vidtube.services.storage import get_storage_service


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.database
    async for session in database.session():
        yield session


async def get_current_user_id(authorization: Optional[str] = Header(default=None)) -> str:
    return resolve_caller(authorization)


async def get_optional_user_id(
    authorization: Optional[str] = Header(default=None),
) -> Optional[str]:
    return resolve_optional_caller(authorization)


def get_media_service(request: Request) -> MediaService:
    media: Optional[MediaService] = getattr(request.app.state, "media_service", None)
    if media is None:
        media = MediaService(get_storage_service())
        request.app.state.media_service = media
    return media
