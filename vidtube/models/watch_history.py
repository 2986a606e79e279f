from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from vidtube.models.base import Base, utcnow


class WatchHistoryEntry(Base):
    """A single view of a video; repeat views append new entries."""

    __tablename__ = "watch_history"
    __table_args__ = (Index("idx_watch_history_user", "user_id", "position"),)

    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    video_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False
    )
    watched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
