from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import ColumnElement, ForeignKey, Index, String, UniqueConstraint, Uuid, and_
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import BaseRecord


class LikeTargetType(str, Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


@dataclass(frozen=True)
class LikeTarget:
    """What a like points at: exactly one video, comment or tweet."""

    kind: LikeTargetType
    id: str

    @classmethod
    def video(cls, video_id: str) -> LikeTarget:
        return cls(LikeTargetType.VIDEO, video_id)

    @classmethod
    def comment(cls, comment_id: str) -> LikeTarget:
        return cls(LikeTargetType.COMMENT, comment_id)

    @classmethod
    def tweet(cls, tweet_id: str) -> LikeTarget:
        return cls(LikeTargetType.TWEET, tweet_id)


class Like(BaseRecord):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("liked_by", "target_type", "target_id", name="uk_likes_user_target"),
        Index("idx_likes_target", "target_type", "target_id"),
    )

    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False)
    liked_by: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    @property
    def target(self) -> LikeTarget:
        return LikeTarget(LikeTargetType(self.target_type), self.target_id)

    @classmethod
    def on(cls, kind: LikeTargetType, target_id: object) -> ColumnElement[bool]:
        """Criterion matching likes of ``kind`` whose target is ``target_id``.

        ``target_id`` may be a literal id or a column, for correlated counts.
        """
        return and_(cls.target_type == kind.value, cls.target_id == target_id)

    @classmethod
    def targeting(cls, target: LikeTarget) -> ColumnElement[bool]:
        return cls.on(target.kind, target.id)
