from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.validators import validate_id
from vidtube.db import insert_ignoring_conflicts
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Comment, Like, LikeTarget, LikeTargetType, Tweet, Video
from vidtube.schemas.common import ToggleResponse

logger = logging.getLogger("vidtube.like_service")

_TARGETS = {
    LikeTargetType.VIDEO: (Video, ErrorCode.VIDEO_NOT_FOUND),
    LikeTargetType.COMMENT: (Comment, ErrorCode.COMMENT_NOT_FOUND),
    LikeTargetType.TWEET: (Tweet, ErrorCode.TWEET_NOT_FOUND),
}


class LikeService:
    @staticmethod
    async def toggle(db: AsyncSession, target: LikeTarget, user_id: str) -> ToggleResponse:
        """Remove the caller's like if present, otherwise add it. Returns action and new count.

        The delete runs first and decides the direction. The insert ignores a
        conflicting row; when a concurrent toggle inserted the pair first, this
        call removes it, so two identical toggles never move the same way.
        """
        model, not_found = _TARGETS[target.kind]
        if await db.scalar(select(model.id).where(model.id == target.id)) is None:
            raise BusinessError(not_found)

        unlike = delete(Like).where(Like.targeting(target), Like.liked_by == user_id)
        removed = await db.execute(unlike)
        if removed.rowcount:
            action = "removed"
        else:
            inserted = await db.execute(
                insert_ignoring_conflicts(
                    db,
                    Like,
                    ("liked_by", "target_type", "target_id"),
                    liked_by=user_id,
                    target_type=target.kind.value,
                    target_id=target.id,
                )
            )
            if inserted.rowcount:
                action = "added"
            else:
                # a concurrent toggle created the pair first; this one undoes it
                await db.execute(unlike)
                action = "removed"
        await db.commit()

        count = await db.scalar(
            select(func.count()).select_from(Like).where(Like.targeting(target))
        )
        logger.info(
            "like %s: %s=%s user_id=%s", action, target.kind.value, target.id, user_id
        )
        return ToggleResponse(action=action, count=count or 0)

    @staticmethod
    async def toggle_video_like(db: AsyncSession, video_id: str, user_id: str) -> ToggleResponse:
        return await LikeService.toggle(
            db, LikeTarget.video(validate_id(video_id, "video_id")), user_id
        )

    @staticmethod
    async def toggle_comment_like(
        db: AsyncSession, comment_id: str, user_id: str
    ) -> ToggleResponse:
        return await LikeService.toggle(
            db, LikeTarget.comment(validate_id(comment_id, "comment_id")), user_id
        )

    @staticmethod
    async def toggle_tweet_like(db: AsyncSession, tweet_id: str, user_id: str) -> ToggleResponse:
        return await LikeService.toggle(
            db, LikeTarget.tweet(validate_id(tweet_id, "tweet_id")), user_id
        )
