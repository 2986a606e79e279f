from __future__ import annotations

from typing import Awaitable, Callable

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.pagination import PageQuery, SortQuery
from vidtube.i18n.codes import ErrorCode
from vidtube.models import User, Video
from vidtube.services.like_service import LikeService
from vidtube.services.views import VideoViews

MakeUser = Callable[..., Awaitable[User]]
MakeVideo = Callable[..., Awaitable[Video]]

# ============================================================================
# VideoFeedView
# ============================================================================


@pytest.mark.asyncio
async def test_feed_search_owner_projection_and_like_count(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    v1 = await make_video(alice, title="t", description="d")
    await make_video(alice, title="cooking", description="soup")

    items, total = await VideoViews.feed(db, PageQuery(), SortQuery(), query="t")
    assert total == 1
    assert items[0].id == v1.id
    assert items[0].owner is not None
    assert items[0].owner.username == "alice"
    assert items[0].owner.fullname == "Alice"
    assert items[0].like_count == 0

    await LikeService.toggle_video_like(db, v1.id, bob.id)
    items, _ = await VideoViews.feed(db, PageQuery(), SortQuery(), query="t")
    assert items[0].like_count == 1

    await LikeService.toggle_video_like(db, v1.id, bob.id)
    items, _ = await VideoViews.feed(db, PageQuery(), SortQuery(), query="t")
    assert items[0].like_count == 0


@pytest.mark.asyncio
async def test_feed_search_matches_description_case_insensitively(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    await make_video(alice, title="Dinner", description="Fresh PASTA at home")
    await make_video(alice, title="100% real", description="percent")

    items, _ = await VideoViews.feed(db, PageQuery(), SortQuery(), query="pasta")
    assert [item.title for item in items] == ["Dinner"]

    # wildcard characters are matched literally
    items, _ = await VideoViews.feed(db, PageQuery(), SortQuery(), query="%")
    assert [item.title for item in items] == ["100% real"]


@pytest.mark.asyncio
async def test_feed_hides_unpublished_and_filters_by_creator(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    await make_video(alice, title="public")
    await make_video(alice, title="draft", is_published=False)
    await make_video(bob, title="bobs")

    items, total = await VideoViews.feed(db, PageQuery(), SortQuery(), creator="ALICE")
    assert total == 1
    assert [item.title for item in items] == ["public"]

    items, _ = await VideoViews.feed(db, PageQuery(), SortQuery(), owner_id=bob.id)
    assert [item.title for item in items] == ["bobs"]

    with pytest.raises(BusinessError) as exc_info:
        await VideoViews.feed(db, PageQuery(), SortQuery(), creator="nobody")
    assert exc_info.value.code == ErrorCode.USER_NOT_FOUND


@pytest.mark.asyncio
async def test_feed_pages_are_slices_of_the_sorted_set(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    for index in range(12):
        await make_video(alice, title=f"video-{index:02d}", views=index % 4)

    sort = SortQuery.parse("views", "asc")
    everything, total = await VideoViews.feed(db, PageQuery(page=1, limit=100), sort)
    assert total == 12
    assert [item.views for item in everything] == sorted(item.views for item in everything)

    for page_number in (1, 2, 3):
        page, _ = await VideoViews.feed(db, PageQuery(page=page_number, limit=5), sort)
        start = (page_number - 1) * 5
        assert len(page) <= 5
        assert [item.id for item in page] == [item.id for item in everything[start : start + 5]]


@pytest.mark.asyncio
async def test_feed_defaults_to_newest_first(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    for title in ("old", "middle", "new"):
        await make_video(alice, title=title)

    items, _ = await VideoViews.feed(db, PageQuery.parse("x", "-1"), SortQuery.parse("bogus"))
    assert [item.title for item in items] == ["new", "middle", "old"]


# ============================================================================
# VideoDetailView
# ============================================================================


@pytest.mark.asyncio
async def test_detail_increments_views_once_per_fetch(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    video = await make_video(alice, views=5)

    for expected in (6, 7, 8):
        detail = await VideoViews.detail(db, video.id)
        assert detail.views == expected

    stored = await db.scalar(select(Video.views).where(Video.id == video.id))
    assert stored == 8


@pytest.mark.asyncio
async def test_detail_reports_caller_like(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    video = await make_video(alice)
    await LikeService.toggle_video_like(db, video.id, bob.id)

    as_bob = await VideoViews.detail(db, video.id, bob.id)
    as_alice = await VideoViews.detail(db, video.id, alice.id)
    anonymous = await VideoViews.detail(db, video.id)

    assert as_bob.is_liked is True
    assert as_bob.like_count == 1
    assert as_alice.is_liked is False
    assert anonymous.is_liked is False


@pytest.mark.asyncio
async def test_unpublished_detail_is_visible_to_owner_only(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    draft = await make_video(alice, is_published=False)

    assert (await VideoViews.detail(db, draft.id, alice.id)).id == draft.id
    for caller in (bob.id, None):
        with pytest.raises(BusinessError) as exc_info:
            await VideoViews.detail(db, draft.id, caller)
        assert exc_info.value.code == ErrorCode.VIDEO_NOT_FOUND


@pytest.mark.asyncio
async def test_detail_rejects_malformed_and_unknown_ids(db: AsyncSession) -> None:
    with pytest.raises(BusinessError) as malformed:
        await VideoViews.detail(db, "not-an-id")
    assert malformed.value.code == ErrorCode.INVALID_PARAMETER

    with pytest.raises(BusinessError) as missing:
        await VideoViews.detail(db, "6f1c2b0e-3d4a-4c5b-9e8f-7a6b5c4d3e2f")
    assert missing.value.code == ErrorCode.VIDEO_NOT_FOUND


# ============================================================================
# WatchHistoryView / LikedVideosView
# ============================================================================


@pytest.mark.asyncio
async def test_watch_history_is_most_recent_first_with_repeats(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    first = await make_video(alice, title="first")
    second = await make_video(alice, title="second")

    assert await VideoViews.watch_history(db, bob.id) == []

    for video in (first, second, first):
        await VideoViews.detail(db, video.id, bob.id)

    history = await VideoViews.watch_history(db, bob.id)
    assert [item.title for item in history] == ["first", "second", "first"]
    assert history[0].owner is not None
    assert history[0].owner.username == "alice"


@pytest.mark.asyncio
async def test_liked_videos_are_flat_records_with_like_totals(
    db: AsyncSession, make_user: MakeUser, make_video: MakeVideo
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    popular = await make_video(alice, title="popular")
    await make_video(alice, title="ignored")

    await LikeService.toggle_video_like(db, popular.id, bob.id)
    await LikeService.toggle_video_like(db, popular.id, carol.id)

    liked = await VideoViews.liked_videos(db, bob.id)
    assert [item.title for item in liked] == ["popular"]
    assert liked[0].likes == 2
    assert liked[0].owner is not None
    assert liked[0].owner.username == "alice"
    assert await VideoViews.liked_videos(db, alice.id) == []
