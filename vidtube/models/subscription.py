from __future__ import annotations

from sqlalchemy import ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import BaseRecord


class Subscription(BaseRecord):
    """``subscriber`` follows ``channel``; both are users."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uk_subscriptions_subscriber_channel"),
        Index("idx_subscriptions_channel", "channel_id"),
    )

    subscriber_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    channel_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
