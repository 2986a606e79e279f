from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CommentRequest(BaseModel):
    content: Optional[str] = Field(default=None)


class CommentResponse(BaseModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CommentOwner(BaseModel):
    id: str
    username: str
    avatar: str


class CommentListItem(BaseModel):
    id: str
    content: str
    created_at: datetime
    owner: Optional[CommentOwner] = None
    like_count: int = 0
