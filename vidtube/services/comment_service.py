from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.ownership import get_owned
from vidtube.core.validators import require_text, validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Comment, Like, LikeTarget, Video
from vidtube.schemas.comment import CommentResponse

logger = logging.getLogger("vidtube.comment_service")


class CommentService:
    @staticmethod
    async def add(
        db: AsyncSession,
        video_id: str,
        owner_id: str,
        content: Optional[str],
    ) -> CommentResponse:
        content = require_text(content, "content")
        video_id = validate_id(video_id, "video_id")
        if await db.scalar(select(Video.id).where(Video.id == video_id)) is None:
            raise BusinessError(ErrorCode.VIDEO_NOT_FOUND)

        comment = Comment(content=content, video_id=video_id, owner_id=owner_id)
        db.add(comment)
        await db.commit()
        await db.refresh(comment)
        logger.info("comment added: comment_id=%s video_id=%s", comment.id, video_id)
        return CommentResponse.model_validate(comment)

    @staticmethod
    async def update(
        db: AsyncSession,
        comment_id: str,
        caller_id: str,
        content: Optional[str],
    ) -> CommentResponse:
        content = require_text(content, "content")
        comment = await get_owned(
            db,
            Comment,
            validate_id(comment_id, "comment_id"),
            caller_id,
            ErrorCode.COMMENT_NOT_FOUND,
        )
        comment.content = content
        await db.commit()
        await db.refresh(comment)
        return CommentResponse.model_validate(comment)

    @staticmethod
    async def delete(db: AsyncSession, comment_id: str, caller_id: str) -> None:
        comment_id = validate_id(comment_id, "comment_id")
        await get_owned(db, Comment, comment_id, caller_id, ErrorCode.COMMENT_NOT_FOUND)
        await db.execute(delete(Like).where(Like.targeting(LikeTarget.comment(comment_id))))
        await db.execute(delete(Comment).where(Comment.id == comment_id))
        await db.commit()
        logger.info("comment deleted: comment_id=%s", comment_id)
