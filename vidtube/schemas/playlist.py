from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlaylistCreateRequest(BaseModel):
    name: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)


class PlaylistUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)


class PlaylistResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    video_ids: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class PlaylistVideoItem(BaseModel):
    id: str
    thumbnail: str
    video_file: str
    title: str
    description: str
    duration: int
    views: int


class PlaylistView(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    playlist_videos: list[PlaylistVideoItem] = Field(default_factory=list)
