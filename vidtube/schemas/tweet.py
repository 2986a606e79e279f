from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from vidtube.schemas.user import OwnerSummary


class TweetRequest(BaseModel):
    content: Optional[str] = Field(default=None)


class TweetResponse(BaseModel):
    id: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TweetListItem(BaseModel):
    id: str
    content: str
    created_at: datetime
    updated_at: datetime
    owner: Optional[OwnerSummary] = None
    like_count: int = 0
