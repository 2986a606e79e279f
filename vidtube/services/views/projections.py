"""Field sets and stages shared by several views."""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import ColumnElement
from sqlalchemy.orm import aliased

from vidtube.core.pipeline import Pipeline
from vidtube.models import Like, LikeTargetType, User, Video

OWNER_FIELDS = ("id", "username", "fullname", "avatar")


def with_owner(
    pipeline: Pipeline,
    owner_id: ColumnElement[Any],
    name: str = "owner",
    fields: Sequence[str] = OWNER_FIELDS,
) -> Pipeline:
    """Left-join the owning user; the row survives with ``owner=None`` if it is gone."""
    owner = aliased(User, name=f"{name}_user")
    return pipeline.lookup(
        name,
        owner,
        owner.id == owner_id,
        **{field: getattr(owner, field) for field in fields},
    )


def with_like_count(
    pipeline: Pipeline,
    name: str,
    kind: LikeTargetType,
    target_id: ColumnElement[Any],
) -> Pipeline:
    counted = aliased(Like, name=f"{name}_likes")
    return pipeline.count(
        name,
        counted,
        counted.target_type == kind.value,
        counted.target_id == target_id,
    )


def video_card_fields(video: Any = Video) -> dict[str, ColumnElement[Any]]:
    return {
        "id": video.id,
        "video_file": video.video_file,
        "thumbnail": video.thumbnail,
        "title": video.title,
        "description": video.description,
        "duration": video.duration,
        "views": video.views,
        "created_at": video.created_at,
    }
