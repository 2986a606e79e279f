from __future__ import annotations

from typing import Awaitable, Callable

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.pagination import PageQuery
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Like, User, Video
from vidtube.models.base import new_id
from vidtube.services.comment_service import CommentService
from vidtube.services.like_service import LikeService
from vidtube.services.views import CommentViews

MakeUser = Callable[..., Awaitable[User]]
MakeVideo = Callable[..., Awaitable[Video]]


@pytest.mark.asyncio
async def test_add_requires_content_and_video(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    video = await make_video(alice)

    with pytest.raises(BusinessError) as blank:
        await CommentService.add(db, video.id, alice.id, "   ")
    assert blank.value.code == ErrorCode.MISSING_REQUIRED_PARAMETER

    with pytest.raises(BusinessError) as missing:
        await CommentService.add(db, new_id(), alice.id, "hello")
    assert missing.value.code == ErrorCode.VIDEO_NOT_FOUND

    comment = await CommentService.add(db, video.id, alice.id, "  hello  ")
    assert comment.content == "hello"


@pytest.mark.asyncio
async def test_other_user_cannot_modify_comment(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    video = await make_video(alice)
    comment = await CommentService.add(db, video.id, alice.id, "mine")

    with pytest.raises(BusinessError) as delete_denied:
        await CommentService.delete(db, comment.id, bob.id)
    assert delete_denied.value.code == ErrorCode.PERMISSION_DENIED

    with pytest.raises(BusinessError) as update_denied:
        await CommentService.update(db, comment.id, bob.id, "hijacked")
    assert update_denied.value.code == ErrorCode.PERMISSION_DENIED

    items, _ = await CommentViews.for_video(db, video.id, PageQuery())
    assert [item.content for item in items] == ["mine"]


@pytest.mark.asyncio
async def test_update_and_delete_cascade_likes(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    video = await make_video(alice)
    comment = await CommentService.add(db, video.id, alice.id, "draft")

    updated = await CommentService.update(db, comment.id, alice.id, "final")
    assert updated.content == "final"

    await LikeService.toggle_comment_like(db, comment.id, bob.id)
    await CommentService.delete(db, comment.id, alice.id)

    assert await db.scalar(select(func.count()).select_from(Like)) == 0
    with pytest.raises(BusinessError) as exc_info:
        await CommentService.update(db, comment.id, alice.id, "again")
    assert exc_info.value.code == ErrorCode.COMMENT_NOT_FOUND


@pytest.mark.asyncio
async def test_comment_list_projection_and_empty_result(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    video = await make_video(alice)

    items, total = await CommentViews.for_video(db, video.id, PageQuery())
    assert (items, total) == ([], 0)

    comment = await CommentService.add(db, video.id, bob.id, "great video")
    await LikeService.toggle_comment_like(db, comment.id, alice.id)

    items, total = await CommentViews.for_video(db, video.id, PageQuery())
    assert total == 1
    assert items[0].content == "great video"
    assert items[0].like_count == 1
    assert items[0].owner is not None
    assert items[0].owner.username == "bob"
    assert items[0].owner.avatar == bob.avatar
