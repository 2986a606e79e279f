from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import BaseRecord


class Comment(BaseRecord):
    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_video_created", "video_id", "created_at"),
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    video_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
