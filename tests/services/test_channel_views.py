from __future__ import annotations

from typing import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.pagination import PageQuery
from vidtube.i18n.codes import ErrorCode
from vidtube.models import User
from vidtube.models.base import new_id
from vidtube.services.like_service import LikeService
from vidtube.services.subscription_service import SubscriptionService
from vidtube.services.tweet_service import TweetService
from vidtube.services.views import ChannelViews

MakeUser = Callable[..., Awaitable[User]]


@pytest.mark.asyncio
async def test_channel_profile_subscription_scenario(
    db: AsyncSession, make_user: MakeUser
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")

    result = await SubscriptionService.toggle(db, alice.id, bob.id)
    assert result.action == "added"
    assert result.count == 1

    as_bob = await ChannelViews.profile(db, "alice", bob.id)
    as_alice = await ChannelViews.profile(db, "alice", alice.id)
    anonymous = await ChannelViews.profile(db, "  Alice ", None)

    assert as_bob.subscribers_count == 1
    assert as_bob.channels_subscribed_to_count == 0
    assert as_bob.is_subscribed is True
    assert as_alice.is_subscribed is False
    assert anonymous.is_subscribed is False
    assert anonymous.subscribers_count == 1

    bob_profile = await ChannelViews.profile(db, "bob")
    assert bob_profile.channels_subscribed_to_count == 1
    assert bob_profile.subscribers_count == 0


@pytest.mark.asyncio
async def test_channel_profile_exposes_public_fields_only(
    db: AsyncSession, make_user: MakeUser
) -> None:
    await make_user("alice")
    profile = await ChannelViews.profile(db, "alice")
    dumped = profile.model_dump()
    assert "password" not in dumped
    assert "refresh_token" not in dumped
    assert dumped["username"] == "alice"


@pytest.mark.asyncio
async def test_channel_profile_not_found(db: AsyncSession) -> None:
    with pytest.raises(BusinessError) as exc_info:
        await ChannelViews.profile(db, "ghost")
    assert exc_info.value.code == ErrorCode.CHANNEL_NOT_FOUND


@pytest.mark.asyncio
async def test_subscriber_lists(db: AsyncSession, make_user: MakeUser) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    await SubscriptionService.toggle(db, alice.id, bob.id)
    await SubscriptionService.toggle(db, alice.id, carol.id)
    await SubscriptionService.toggle(db, carol.id, bob.id)

    subscribers = await ChannelViews.subscribers(db, alice.id)
    assert {item.subscriber.username for item in subscribers if item.subscriber} == {
        "bob",
        "carol",
    }

    channels = await ChannelViews.subscribed_channels(db, bob.id)
    assert sorted(channel.username for channel in channels) == ["alice", "carol"]
    assert await ChannelViews.subscribed_channels(db, alice.id) == []


@pytest.mark.asyncio
async def test_subscriber_lists_require_existing_channel(db: AsyncSession) -> None:
    for view in (ChannelViews.subscribers, ChannelViews.subscribed_channels):
        with pytest.raises(BusinessError) as exc_info:
            await view(db, new_id())
        assert exc_info.value.code == ErrorCode.CHANNEL_NOT_FOUND


@pytest.mark.asyncio
async def test_user_tweets_newest_first_with_like_counts(
    db: AsyncSession, make_user: MakeUser
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    first = await TweetService.create(db, alice.id, "first")
    await TweetService.create(db, alice.id, "second")
    await LikeService.toggle_tweet_like(db, first.id, bob.id)

    items, total = await ChannelViews.tweets(db, alice.id, PageQuery())
    assert total == 2
    by_content = {item.content: item for item in items}
    assert by_content["first"].like_count == 1
    assert by_content["second"].like_count == 0
    assert by_content["first"].owner is not None
    assert by_content["first"].owner.username == "alice"

    page, _ = await ChannelViews.tweets(db, alice.id, PageQuery(page=2, limit=1))
    assert len(page) == 1

    empty, empty_total = await ChannelViews.tweets(db, bob.id, PageQuery())
    assert (empty, empty_total) == ([], 0)
