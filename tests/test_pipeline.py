from __future__ import annotations

from typing import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.pagination import PageQuery
from vidtube.core.pipeline import Pipeline
from vidtube.models import Like, LikeTargetType, Playlist, PlaylistVideo, User, Video
from vidtube.models.base import new_id
from vidtube.services.views.projections import with_like_count, with_owner


def _titles(rows: list[dict]) -> list[str]:
    return [row["title"] for row in rows]


@pytest.mark.asyncio
async def test_lookup_keeps_rows_without_a_match(
    db: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_video: Callable[..., Awaitable[Video]],
) -> None:
    alice = await make_user("alice")
    await make_video(alice, title="owned")
    orphan = Video(
        title="orphan",
        description="d",
        video_file="f",
        video_file_key="f",
        thumbnail="t",
        thumbnail_key="t",
        duration=1,
        owner_id=new_id(),
    )
    db.add(orphan)
    await db.commit()

    pipeline = with_owner(Pipeline(Video).project(title=Video.title), Video.owner_id)
    rows = {row["title"]: row for row in await pipeline.all(db)}

    assert rows["owned"]["owner"] == {
        "id": alice.id,
        "username": "alice",
        "fullname": "Alice",
        "avatar": alice.avatar,
    }
    assert rows["orphan"]["owner"] is None


@pytest.mark.asyncio
async def test_count_is_zero_without_related_rows(
    db: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_video: Callable[..., Awaitable[Video]],
) -> None:
    alice = await make_user("alice")
    bob = await make_user("bob")
    liked = await make_video(alice, title="liked")
    await make_video(alice, title="quiet")
    for user in (alice, bob):
        db.add(Like(target_type=LikeTargetType.VIDEO.value, target_id=liked.id, liked_by=user.id))
    await db.commit()

    pipeline = with_like_count(
        Pipeline(Video).project(title=Video.title), "like_count", LikeTargetType.VIDEO, Video.id
    )
    counts = {row["title"]: row["like_count"] for row in await pipeline.all(db)}
    assert counts == {"liked": 2, "quiet": 0}


@pytest.mark.asyncio
async def test_flag_and_disabled_flag(
    db: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_video: Callable[..., Awaitable[Video]],
) -> None:
    alice = await make_user("alice")
    video = await make_video(alice)
    db.add(Like(target_type=LikeTargetType.VIDEO.value, target_id=video.id, liked_by=alice.id))
    await db.commit()

    base = Pipeline(Video).project(id=Video.id)
    liked = await base.flag(
        "is_liked", Like, Like.on(LikeTargetType.VIDEO, Video.id), Like.liked_by == alice.id
    ).first(db)
    anonymous = await base.flag("is_liked", Like, enabled=False).first(db)

    assert liked is not None and liked["is_liked"] is True
    assert anonymous is not None and anonymous["is_liked"] is False


@pytest.mark.asyncio
async def test_sort_paginate_and_total(
    db: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_video: Callable[..., Awaitable[Video]],
) -> None:
    alice = await make_user("alice")
    for index in range(7):
        await make_video(alice, title=f"v{index}")

    pipeline = Pipeline(Video).project(title=Video.title).sort(Video.created_at.asc())
    everything = _titles(await pipeline.all(db))
    page = await pipeline.paginate(PageQuery(page=2, limit=3)).all(db)

    assert await pipeline.total(db) == 7
    assert _titles(page) == everything[3:6]
    assert await pipeline.paginate(PageQuery(page=4, limit=3)).all(db) == []


@pytest.mark.asyncio
async def test_embed_groups_children_in_order(
    db: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_video: Callable[..., Awaitable[Video]],
) -> None:
    alice = await make_user("alice")
    first = await make_video(alice, title="first")
    second = await make_video(alice, title="second")
    filled = Playlist(name="filled", owner_id=alice.id)
    empty = Playlist(name="empty", owner_id=alice.id)
    db.add_all([filled, empty])
    await db.flush()
    for video in (second, first, second):
        db.add(PlaylistVideo(playlist_id=filled.id, video_id=video.id))
    await db.commit()

    children = (
        Pipeline(PlaylistVideo)
        .join(Video, Video.id == PlaylistVideo.video_id)
        .project(title=Video.title)
        .sort(PlaylistVideo.position.asc())
    )
    pipeline = (
        Pipeline(Playlist)
        .project(id=Playlist.id, name=Playlist.name)
        .embed("videos", children, "id", PlaylistVideo.playlist_id)
    )
    rows = {row["name"]: row for row in await pipeline.all(db)}

    assert _titles(rows["filled"]["videos"]) == ["second", "first", "second"]
    assert rows["empty"]["videos"] == []


@pytest.mark.asyncio
async def test_replace_root_promotes_nested_object(
    db: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_video: Callable[..., Awaitable[Video]],
) -> None:
    alice = await make_user("alice")
    await make_video(alice)

    pipeline = with_owner(Pipeline(Video).project(id=Video.id), Video.owner_id)
    rows = await pipeline.replace_root("owner").all(db)

    assert rows == [
        {"id": alice.id, "username": "alice", "fullname": "Alice", "avatar": alice.avatar}
    ]


def test_pipeline_without_fields_is_rejected() -> None:
    with pytest.raises(ValueError):
        Pipeline(Video).statement()
