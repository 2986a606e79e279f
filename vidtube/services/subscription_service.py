from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.validators import validate_id
from vidtube.db import insert_ignoring_conflicts
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Subscription, User
from vidtube.schemas.common import ToggleResponse

logger = logging.getLogger("vidtube.subscription_service")


class SubscriptionService:
    @staticmethod
    async def toggle(db: AsyncSession, channel_id: str, subscriber_id: str) -> ToggleResponse:
        """Subscribe to or unsubscribe from a channel. Returns action and subscriber count."""
        channel_id = validate_id(channel_id, "channel_id")
        if channel_id == subscriber_id:
            raise BusinessError(ErrorCode.SELF_SUBSCRIPTION_NOT_ALLOWED)
        if await db.scalar(select(User.id).where(User.id == channel_id)) is None:
            raise BusinessError(ErrorCode.CHANNEL_NOT_FOUND)

        unsubscribe = delete(Subscription).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
        removed = await db.execute(unsubscribe)
        if removed.rowcount:
            action = "removed"
        else:
            inserted = await db.execute(
                insert_ignoring_conflicts(
                    db,
                    Subscription,
                    ("subscriber_id", "channel_id"),
                    subscriber_id=subscriber_id,
                    channel_id=channel_id,
                )
            )
            if inserted.rowcount:
                action = "added"
            else:
                # a concurrent toggle created the pair first; this one undoes it
                await db.execute(unsubscribe)
                action = "removed"
        await db.commit()

        count = await db.scalar(
            select(func.count())
            .select_from(Subscription)
            .where(Subscription.channel_id == channel_id)
        )
        logger.info(
            "subscription %s: channel_id=%s subscriber_id=%s", action, channel_id, subscriber_id
        )
        return ToggleResponse(action=action, count=count or 0)
