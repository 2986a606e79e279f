from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.pagination import PageQuery
from vidtube.core.pipeline import Pipeline
from vidtube.core.validators import validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Comment, LikeTargetType, Video
from vidtube.schemas.comment import CommentListItem
from vidtube.services.views.projections import with_like_count, with_owner


class CommentViews:
    @staticmethod
    async def for_video(
        db: AsyncSession,
        video_id: str,
        page: PageQuery,
    ) -> tuple[list[CommentListItem], int]:
        """Newest comments first; a video without comments yields an empty page."""
        video_id = validate_id(video_id, "video_id")
        if await db.scalar(select(Video.id).where(Video.id == video_id)) is None:
            raise BusinessError(ErrorCode.VIDEO_NOT_FOUND)

        pipeline = (
            Pipeline(Comment)
            .match(Comment.video_id == video_id)
            .project(id=Comment.id, content=Comment.content, created_at=Comment.created_at)
        )
        pipeline = with_owner(pipeline, Comment.owner_id, fields=("id", "username", "avatar"))
        pipeline = with_like_count(pipeline, "like_count", LikeTargetType.COMMENT, Comment.id)
        total = await pipeline.total(db)
        rows = await (
            pipeline.sort(Comment.created_at.desc(), Comment.id.desc()).paginate(page).all(db)
        )
        return [CommentListItem.model_validate(row) for row in rows], total
