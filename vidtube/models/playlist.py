from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import Base, BaseRecord


class Playlist(BaseRecord):
    __tablename__ = "playlists"
    __table_args__ = (Index("idx_playlists_owner_created", "owner_id", "created_at"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )


class PlaylistVideo(Base):
    """One slot of a playlist; ``position`` grows with every append."""

    __tablename__ = "playlist_videos"
    __table_args__ = (Index("idx_playlist_videos_playlist", "playlist_id", "position"),)

    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    playlist_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False
    )
    video_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False
    )
