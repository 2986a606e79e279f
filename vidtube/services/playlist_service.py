from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.ownership import get_owned
from vidtube.core.validators import optional_text, require_any, require_text, validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Playlist, PlaylistVideo, Video
from vidtube.schemas.playlist import PlaylistResponse

logger = logging.getLogger("vidtube.playlist_service")


async def _to_response(db: AsyncSession, playlist: Playlist) -> PlaylistResponse:
    result = await db.execute(
        select(PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id == playlist.id)
        .order_by(PlaylistVideo.position.asc())
    )
    return PlaylistResponse(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner_id=playlist.owner_id,
        video_ids=list(result.scalars().all()),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


class PlaylistService:
    @staticmethod
    async def create(
        db: AsyncSession,
        owner_id: str,
        name: Optional[str],
        description: Optional[str] = None,
    ) -> PlaylistResponse:
        playlist = Playlist(
            name=require_text(name, "name"),
            description=optional_text(description),
            owner_id=owner_id,
        )
        db.add(playlist)
        await db.commit()
        await db.refresh(playlist)
        logger.info("playlist created: playlist_id=%s", playlist.id)
        return await _to_response(db, playlist)

    @staticmethod
    async def update(
        db: AsyncSession,
        playlist_id: str,
        caller_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PlaylistResponse:
        name = optional_text(name)
        description = optional_text(description)
        require_any("name or description", name, description)
        playlist = await get_owned(
            db,
            Playlist,
            validate_id(playlist_id, "playlist_id"),
            caller_id,
            ErrorCode.PLAYLIST_NOT_FOUND,
        )
        if name:
            playlist.name = name
        if description:
            playlist.description = description
        await db.commit()
        await db.refresh(playlist)
        return await _to_response(db, playlist)

    @staticmethod
    async def delete(db: AsyncSession, playlist_id: str, caller_id: str) -> None:
        playlist_id = validate_id(playlist_id, "playlist_id")
        await get_owned(db, Playlist, playlist_id, caller_id, ErrorCode.PLAYLIST_NOT_FOUND)
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
        await db.execute(delete(Playlist).where(Playlist.id == playlist_id))
        await db.commit()
        logger.info("playlist deleted: playlist_id=%s", playlist_id)

    @staticmethod
    async def add_video(
        db: AsyncSession,
        playlist_id: str,
        video_id: str,
        caller_id: str,
    ) -> PlaylistResponse:
        """Append a video; adding the same video twice keeps both entries."""
        video_id = validate_id(video_id, "video_id")
        playlist = await get_owned(
            db,
            Playlist,
            validate_id(playlist_id, "playlist_id"),
            caller_id,
            ErrorCode.PLAYLIST_NOT_FOUND,
        )
        if await db.scalar(select(Video.id).where(Video.id == video_id)) is None:
            raise BusinessError(ErrorCode.VIDEO_NOT_FOUND)

        db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video_id))
        await db.commit()
        await db.refresh(playlist)
        return await _to_response(db, playlist)

    @staticmethod
    async def remove_video(
        db: AsyncSession,
        playlist_id: str,
        video_id: str,
        caller_id: str,
    ) -> PlaylistResponse:
        """Remove every occurrence of the video; absence is a parameter error."""
        video_id = validate_id(video_id, "video_id")
        playlist = await get_owned(
            db,
            Playlist,
            validate_id(playlist_id, "playlist_id"),
            caller_id,
            ErrorCode.PLAYLIST_NOT_FOUND,
        )
        removed = await db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist.id,
                PlaylistVideo.video_id == video_id,
            )
        )
        if not removed.rowcount:
            raise BusinessError(ErrorCode.VIDEO_NOT_IN_PLAYLIST)
        await db.commit()
        await db.refresh(playlist)
        return await _to_response(db, playlist)
