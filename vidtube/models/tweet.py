from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import BaseRecord


class Tweet(BaseRecord):
    __tablename__ = "tweets"
    __table_args__ = (Index("idx_tweets_owner_created", "owner_id", "created_at"),)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
