from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy import delete, not_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.ownership import get_owned
from vidtube.core.validators import optional_text, require_any, require_text, validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import (
    Comment,
    Like,
    LikeTargetType,
    PlaylistVideo,
    Video,
    WatchHistoryEntry,
)
from vidtube.schemas.video import VideoResponse
from vidtube.services.media_service import MediaKind, MediaService, PathLike

logger = logging.getLogger("vidtube.video_service")


class VideoService:
    @staticmethod
    async def publish(
        db: AsyncSession,
        media: MediaService,
        owner_id: str,
        title: Optional[str],
        description: Optional[str],
        video_path: Optional[PathLike],
        thumbnail_path: Optional[PathLike],
    ) -> VideoResponse:
        try:
            title = require_text(title, "title")
            description = require_text(description, "description")
            if not video_path:
                raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field="video_file")
            if not thumbnail_path:
                raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field="thumbnail")
        except BusinessError:
            media.discard(video_path, thumbnail_path)
            raise

        try:
            video_file = await media.upload(
                video_path, "videos", MediaKind.VIDEO, field="video_file"
            )
        except BusinessError:
            media.discard(thumbnail_path)
            raise
        try:
            thumbnail = await media.upload(
                thumbnail_path, "thumbnails", MediaKind.IMAGE, field="thumbnail"
            )
        except BusinessError:
            await media.delete_quietly(video_file.public_id)
            raise

        video = Video(
            title=title,
            description=description,
            video_file=video_file.url,
            video_file_key=video_file.public_id,
            thumbnail=thumbnail.url,
            thumbnail_key=thumbnail.public_id,
            duration=video_file.duration or 0,
            owner_id=owner_id,
        )
        db.add(video)
        try:
            await db.commit()
            await db.refresh(video)
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("video creation failed: owner_id=%s", owner_id)
            await media.delete_quietly(video_file.public_id, thumbnail.public_id)
            raise BusinessError(ErrorCode.SYSTEM_ERROR) from exc

        logger.info("video published: video_id=%s owner_id=%s", video.id, owner_id)
        return VideoResponse.model_validate(video)

    @staticmethod
    async def update(
        db: AsyncSession,
        media: MediaService,
        video_id: str,
        caller_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[PathLike] = None,
    ) -> VideoResponse:
        """Partial update: any non-empty subset of title, description and thumbnail."""
        try:
            title = optional_text(title)
            description = optional_text(description)
            require_any("title, description or thumbnail", title, description, thumbnail_path)
            video = await get_owned(
                db, Video, validate_id(video_id, "video_id"), caller_id, ErrorCode.VIDEO_NOT_FOUND
            )
        except BusinessError:
            media.discard(thumbnail_path)
            raise

        previous_thumbnail = None
        new_thumbnail = None
        if thumbnail_path:
            thumbnail = await media.upload(
                thumbnail_path, "thumbnails", MediaKind.IMAGE, field="thumbnail"
            )
            previous_thumbnail = video.thumbnail_key
            new_thumbnail = thumbnail.public_id
            video.thumbnail = thumbnail.url
            video.thumbnail_key = new_thumbnail
        if title:
            video.title = title
        if description:
            video.description = description

        try:
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("video update failed: video_id=%s", video_id)
            # rollback expired the instance; only locals are safe to read here
            await media.delete_quietly(new_thumbnail)
            raise BusinessError(ErrorCode.SYSTEM_ERROR) from exc

        await db.refresh(video)
        await media.delete_quietly(previous_thumbnail)
        return VideoResponse.model_validate(video)

    @staticmethod
    async def delete(
        db: AsyncSession,
        media: MediaService,
        video_id: str,
        caller_id: str,
    ) -> None:
        """Delete a video with its comments, likes, playlist slots and history entries.

        Store rows go in one transaction; the stored media objects are removed
        concurrently afterwards and any failure among them is reported.
        """
        video_id = validate_id(video_id, "video_id")
        video = await get_owned(db, Video, video_id, caller_id, ErrorCode.VIDEO_NOT_FOUND)
        media_keys = [video.video_file_key, video.thumbnail_key]

        comment_ids = select(Comment.id).where(Comment.video_id == video_id)
        await db.execute(
            delete(Like).where(
                Like.target_type == LikeTargetType.COMMENT.value,
                Like.target_id.in_(comment_ids),
            )
        )
        await db.execute(delete(Comment).where(Comment.video_id == video_id))
        await db.execute(delete(Like).where(Like.on(LikeTargetType.VIDEO, video_id)))
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id == video_id))
        await db.execute(delete(WatchHistoryEntry).where(WatchHistoryEntry.video_id == video_id))
        await db.execute(delete(Video).where(Video.id == video_id))
        await db.commit()
        logger.info("video deleted: video_id=%s", video_id)

        outcomes = await asyncio.gather(
            *(media.delete(key) for key in media_keys if key),
            return_exceptions=True,
        )
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        if failures:
            logger.error(
                "video %s deleted but %s media object(s) remain", video_id, len(failures)
            )
            raise BusinessError(ErrorCode.MEDIA_DELETE_FAILED) from failures[0]

    @staticmethod
    async def toggle_publish_status(
        db: AsyncSession,
        video_id: str,
        caller_id: str,
    ) -> VideoResponse:
        video_id = validate_id(video_id, "video_id")
        video = await get_owned(db, Video, video_id, caller_id, ErrorCode.VIDEO_NOT_FOUND)
        await db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values(is_published=not_(Video.is_published))
        )
        await db.commit()
        await db.refresh(video)
        logger.info(
            "video publish status toggled: video_id=%s published=%s", video_id, video.is_published
        )
        return VideoResponse.model_validate(video)
