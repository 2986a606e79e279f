from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from vidtube.core.exceptions import BusinessError
from vidtube.core.ownership import is_owner
from vidtube.core.pagination import PageQuery, SortQuery
from vidtube.core.pipeline import Pipeline
from vidtube.core.validators import optional_text, validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Like, LikeTargetType, User, Video, WatchHistoryEntry
from vidtube.schemas.video import (
    LikedVideoItem,
    VideoCard,
    VideoDetailResponse,
    WatchHistoryItem,
)
from vidtube.services.views.projections import video_card_fields, with_like_count, with_owner

logger = logging.getLogger("vidtube.views.videos")

SORT_COLUMNS = {
    "created_at": Video.created_at,
    "updated_at": Video.updated_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}
DEFAULT_SORT = "created_at"


def _video_card() -> Pipeline:
    pipeline = Pipeline(Video).project(**video_card_fields(), is_published=Video.is_published)
    pipeline = with_owner(pipeline, Video.owner_id)
    return with_like_count(pipeline, "like_count", LikeTargetType.VIDEO, Video.id)


class VideoViews:
    @staticmethod
    async def feed(
        db: AsyncSession,
        page: PageQuery,
        sort: SortQuery,
        query: Optional[str] = None,
        creator: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> tuple[list[VideoCard], int]:
        """Published videos, optionally searched and narrowed to one creator."""
        pipeline = _video_card().match(Video.is_published.is_(True))

        search = optional_text(query)
        if search:
            pipeline = pipeline.match(
                or_(
                    Video.title.icontains(search, autoescape=True),
                    Video.description.icontains(search, autoescape=True),
                )
            )

        creator_name = optional_text(creator)
        if creator_name:
            creator_id = await db.scalar(
                select(User.id).where(User.username == creator_name.lower())
            )
            if creator_id is None:
                raise BusinessError(ErrorCode.USER_NOT_FOUND)
            pipeline = pipeline.match(Video.owner_id == creator_id)

        if owner_id:
            pipeline = pipeline.match(Video.owner_id == validate_id(owner_id, "owner_id"))

        total = await pipeline.total(db)
        rows = await (
            pipeline.sort(sort.order_by(SORT_COLUMNS, DEFAULT_SORT), Video.id.desc())
            .paginate(page)
            .all(db)
        )
        return [VideoCard.model_validate(row) for row in rows], total

    @staticmethod
    async def detail(
        db: AsyncSession,
        video_id: str,
        caller_id: Optional[str] = None,
    ) -> VideoDetailResponse:
        """Compose a single video and record the view.

        Every successful fetch increments the view counter by one and, for a
        known caller, appends the video to their watch history.
        """
        video_id = validate_id(video_id, "video_id")
        result = await db.execute(
            select(Video.owner_id, Video.is_published).where(Video.id == video_id)
        )
        state = result.one_or_none()
        if state is None or not (state.is_published or is_owner(state.owner_id, caller_id)):
            raise BusinessError(ErrorCode.VIDEO_NOT_FOUND)

        await db.execute(
            update(Video).where(Video.id == video_id).values(views=Video.views + 1)
        )
        if caller_id:
            db.add(WatchHistoryEntry(user_id=caller_id, video_id=video_id))
        await db.commit()

        liked = aliased(Like, name="caller_likes")
        pipeline = (
            _video_card()
            .match(Video.id == video_id)
            .project(updated_at=Video.updated_at)
            .flag(
                "is_liked",
                liked,
                liked.target_type == LikeTargetType.VIDEO.value,
                liked.target_id == Video.id,
                liked.liked_by == caller_id,
                enabled=caller_id is not None,
            )
        )
        row = await pipeline.first(db)
        if row is None:
            raise BusinessError(ErrorCode.VIDEO_NOT_FOUND)
        return VideoDetailResponse.model_validate(row)

    @staticmethod
    async def watch_history(db: AsyncSession, user_id: str) -> list[WatchHistoryItem]:
        """Most recent view first; repeat views appear once per view."""
        pipeline = (
            Pipeline(WatchHistoryEntry)
            .match(WatchHistoryEntry.user_id == user_id)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .project(**video_card_fields(), watched_at=WatchHistoryEntry.watched_at)
        )
        pipeline = with_owner(pipeline, Video.owner_id)
        rows = await pipeline.sort(WatchHistoryEntry.position.desc()).all(db)
        return [WatchHistoryItem.model_validate(row) for row in rows]

    @staticmethod
    async def liked_videos(db: AsyncSession, user_id: str) -> list[LikedVideoItem]:
        pipeline = (
            Pipeline(Like)
            .match(Like.liked_by == user_id, Like.target_type == LikeTargetType.VIDEO.value)
            .join(Video, Video.id == Like.target_id)
            .project(**video_card_fields())
        )
        pipeline = with_owner(pipeline, Video.owner_id)
        pipeline = with_like_count(pipeline, "likes", LikeTargetType.VIDEO, Video.id)
        rows = await pipeline.sort(Like.created_at.desc(), Like.id.desc()).all(db)
        return [LikedVideoItem.model_validate(row) for row in rows]
