from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from vidtube.schemas.user import OwnerSummary


class VideoResponse(BaseModel):
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: int
    views: int
    is_published: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VideoCard(BaseModel):
    """Feed entry: the video, its owner's profile and its like count."""

    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: int
    views: int
    is_published: bool
    created_at: datetime
    owner: Optional[OwnerSummary] = None
    like_count: int = 0


class VideoDetailResponse(VideoCard):
    updated_at: datetime
    is_liked: bool = False


class LikedVideoItem(BaseModel):
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: int
    views: int
    created_at: datetime
    owner: Optional[OwnerSummary] = None
    likes: int = 0


class WatchHistoryItem(BaseModel):
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: int
    views: int
    created_at: datetime
    watched_at: datetime
    owner: Optional[OwnerSummary] = None
