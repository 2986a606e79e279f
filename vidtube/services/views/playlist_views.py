from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.pipeline import Pipeline
from vidtube.core.validators import validate_id
from vidtube.i18n.codes import ErrorCode
from vidtube.models import Playlist, PlaylistVideo, Video
from vidtube.schemas.playlist import PlaylistView


def _playlist() -> Pipeline:
    videos = (
        Pipeline(PlaylistVideo)
        .join(Video, Video.id == PlaylistVideo.video_id)
        .project(
            id=Video.id,
            thumbnail=Video.thumbnail,
            video_file=Video.video_file,
            title=Video.title,
            description=Video.description,
            duration=Video.duration,
            views=Video.views,
        )
        .sort(PlaylistVideo.position.asc())
    )
    return (
        Pipeline(Playlist)
        .project(
            id=Playlist.id,
            name=Playlist.name,
            description=Playlist.description,
            created_at=Playlist.created_at,
        )
        .embed("playlist_videos", videos, "id", PlaylistVideo.playlist_id)
    )


class PlaylistViews:
    @staticmethod
    async def get(db: AsyncSession, playlist_id: str) -> PlaylistView:
        playlist_id = validate_id(playlist_id, "playlist_id")
        row = await _playlist().match(Playlist.id == playlist_id).first(db)
        if row is None:
            raise BusinessError(ErrorCode.PLAYLIST_NOT_FOUND)
        return PlaylistView.model_validate(row)

    @staticmethod
    async def by_owner(db: AsyncSession, owner_id: str) -> list[PlaylistView]:
        owner_id = validate_id(owner_id, "user_id")
        rows = await (
            _playlist()
            .match(Playlist.owner_id == owner_id)
            .sort(Playlist.created_at.desc(), Playlist.id.desc())
            .all(db)
        )
        return [PlaylistView.model_validate(row) for row in rows]
