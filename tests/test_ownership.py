from __future__ import annotations

from typing import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.ownership import authorize, get_owned, is_owner
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Tweet, User
from vidtube.models.base import new_id


def test_is_owner() -> None:
    owner_id = new_id()
    assert is_owner(owner_id, owner_id)
    assert not is_owner(owner_id, new_id())
    assert not is_owner(owner_id, None)


def test_authorize_denies_with_forbidden() -> None:
    with pytest.raises(BusinessError) as exc_info:
        authorize(new_id(), new_id())
    assert exc_info.value.code == ErrorCode.PERMISSION_DENIED
    assert exc_info.value.http_status == 403


@pytest.mark.asyncio
async def test_get_owned_checks_existence_before_ownership(
    db: AsyncSession, make_user: Callable[..., Awaitable[User]]
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    tweet = Tweet(content="hello", owner_id=alice.id)
    db.add(tweet)
    await db.commit()

    with pytest.raises(BusinessError) as missing:
        await get_owned(db, Tweet, new_id(), bob.id, ErrorCode.TWEET_NOT_FOUND)
    assert missing.value.code == ErrorCode.TWEET_NOT_FOUND

    with pytest.raises(BusinessError) as denied:
        await get_owned(db, Tweet, tweet.id, bob.id, ErrorCode.TWEET_NOT_FOUND)
    assert denied.value.code == ErrorCode.PERMISSION_DENIED

    loaded = await get_owned(db, Tweet, tweet.id, alice.id, ErrorCode.TWEET_NOT_FOUND)
    assert loaded.id == tweet.id
