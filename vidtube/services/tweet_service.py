from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.ownership import get_owned
from vidtube.core.validators import require_text, validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Like, LikeTarget, Tweet
from vidtube.schemas.tweet import TweetResponse

logger = logging.getLogger("vidtube.tweet_service")


class TweetService:
    @staticmethod
    async def create(db: AsyncSession, owner_id: str, content: Optional[str]) -> TweetResponse:
        tweet = Tweet(content=require_text(content, "content"), owner_id=owner_id)
        db.add(tweet)
        await db.commit()
        await db.refresh(tweet)
        logger.info("tweet created: tweet_id=%s", tweet.id)
        return TweetResponse.model_validate(tweet)

    @staticmethod
    async def update(
        db: AsyncSession,
        tweet_id: str,
        caller_id: str,
        content: Optional[str],
    ) -> TweetResponse:
        content = require_text(content, "content")
        tweet = await get_owned(
            db, Tweet, validate_id(tweet_id, "tweet_id"), caller_id, ErrorCode.TWEET_NOT_FOUND
        )
        tweet.content = content
        await db.commit()
        await db.refresh(tweet)
        return TweetResponse.model_validate(tweet)

    @staticmethod
    async def delete(db: AsyncSession, tweet_id: str, caller_id: str) -> None:
        tweet_id = validate_id(tweet_id, "tweet_id")
        await get_owned(db, Tweet, tweet_id, caller_id, ErrorCode.TWEET_NOT_FOUND)
        await db.execute(delete(Like).where(Like.targeting(LikeTarget.tweet(tweet_id))))
        await db.execute(delete(Tweet).where(Tweet.id == tweet_id))
        await db.commit()
        logger.info("tweet deleted: tweet_id=%s", tweet_id)
