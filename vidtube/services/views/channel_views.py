from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from vidtube.core.exceptions import BusinessError
from vidtube.core.pagination import PageQuery
from vidtube.core.pipeline import Pipeline
from vidtube.core.validators import require_text, validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import LikeTargetType, Subscription, Tweet, User
from vidtube.schemas.subscription import SubscriberItem
from vidtube.schemas.tweet import TweetListItem
from vidtube.schemas.user import ChannelProfileResponse, OwnerSummary
from vidtube.services.views.projections import with_like_count, with_owner


async def _ensure_user(db: AsyncSession, user_id: str, not_found: ErrorCode) -> None:
    found = await db.scalar(select(User.id).where(User.id == user_id))
    if found is None:
        raise BusinessError(not_found)


class ChannelViews:
    @staticmethod
    async def profile(
        db: AsyncSession,
        username: Optional[str],
        caller_id: Optional[str] = None,
    ) -> ChannelProfileResponse:
        """Public channel card with subscription counts and the caller's membership."""
        username = require_text(username, "username").lower()
        subscribers = aliased(Subscription, name="subscribers")
        subscribed_to = aliased(Subscription, name="subscribed_to")
        membership = aliased(Subscription, name="membership")
        pipeline = (
            Pipeline(User)
            .match(User.username == username)
            .project(
                id=User.id,
                username=User.username,
                email=User.email,
                fullname=User.fullname,
                avatar=User.avatar,
                cover_image=User.cover_image,
                created_at=User.created_at,
            )
            .count("subscribers_count", subscribers, subscribers.channel_id == User.id)
            .count(
                "channels_subscribed_to_count",
                subscribed_to,
                subscribed_to.subscriber_id == User.id,
            )
            .flag(
                "is_subscribed",
                membership,
                membership.channel_id == User.id,
                membership.subscriber_id == caller_id,
                enabled=caller_id is not None,
            )
        )
        row = await pipeline.first(db)
        if row is None:
            raise BusinessError(ErrorCode.CHANNEL_NOT_FOUND)
        return ChannelProfileResponse.model_validate(row)

    @staticmethod
    async def subscribers(db: AsyncSession, channel_id: str) -> list[SubscriberItem]:
        channel_id = validate_id(channel_id, "channel_id")
        await _ensure_user(db, channel_id, ErrorCode.CHANNEL_NOT_FOUND)
        pipeline = (
            Pipeline(Subscription)
            .match(Subscription.channel_id == channel_id)
            .project(id=Subscription.id, subscribed_at=Subscription.created_at)
        )
        pipeline = with_owner(pipeline, Subscription.subscriber_id, name="subscriber")
        rows = await pipeline.sort(Subscription.created_at.desc(), Subscription.id.desc()).all(db)
        return [SubscriberItem.model_validate(row) for row in rows]

    @staticmethod
    async def subscribed_channels(db: AsyncSession, subscriber_id: str) -> list[OwnerSummary]:
        """Channels the user follows, each flattened to the channel's own profile."""
        subscriber_id = validate_id(subscriber_id, "subscriber_id")
        await _ensure_user(db, subscriber_id, ErrorCode.CHANNEL_NOT_FOUND)
        pipeline = (
            Pipeline(Subscription)
            .match(Subscription.subscriber_id == subscriber_id)
            .project(id=Subscription.id)
        )
        pipeline = with_owner(pipeline, Subscription.channel_id, name="channel")
        rows = await (
            pipeline.sort(Subscription.created_at.desc(), Subscription.id.desc())
            .replace_root("channel")
            .all(db)
        )
        return [OwnerSummary.model_validate(row) for row in rows]

    @staticmethod
    async def tweets(
        db: AsyncSession,
        user_id: str,
        page: PageQuery,
    ) -> tuple[list[TweetListItem], int]:
        user_id = validate_id(user_id, "user_id")
        await _ensure_user(db, user_id, ErrorCode.USER_NOT_FOUND)
        pipeline = (
            Pipeline(Tweet)
            .match(Tweet.owner_id == user_id)
            .project(
                id=Tweet.id,
                content=Tweet.content,
                created_at=Tweet.created_at,
                updated_at=Tweet.updated_at,
            )
        )
        pipeline = with_owner(pipeline, Tweet.owner_id)
        pipeline = with_like_count(pipeline, "like_count", LikeTargetType.TWEET, Tweet.id)
        total = await pipeline.total(db)
        rows = await (
            pipeline.sort(Tweet.created_at.desc(), Tweet.id.desc()).paginate(page).all(db)
        )
        return [TweetListItem.model_validate(row) for row in rows], total
